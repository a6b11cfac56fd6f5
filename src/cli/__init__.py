# =============================================================================
# src/cli/__init__.py -- CLI Module Overview
# =============================================================================
#
# Command-line access to the profile pipeline without running the API
# server.  One command today:
#
#   PROFILE (profile.py)
#      Fetches the token holder's listening history, builds insights,
#      sources and ranks playlist recommendations, and prints a text
#      report or JSON.
#
# Architecture Notes:
#   - argparse, like the rest of the tooling.
#   - The command wires its own providers instead of going through
#     main.py, because it runs as a one-shot script.
# =============================================================================

"""CLI tools for tastegraph.

- ``python -m src.cli.profile`` -- generate a profile and recommendations.
"""
