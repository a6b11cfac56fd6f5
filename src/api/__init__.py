"""HTTP surface for tastegraph: routes, schemas and middleware."""
