"""Static domain knowledge for genre inference and playlist scoring.

# ─── PURPOSE ───────────────────────────────────────────────────────────
#
# Hand-curated lookup tables used by the classifier, the candidate
# sourcer and the scorer:
#
#   - artist-name keyword families per genre (classifier, weight 0.4)
#   - track-title cues, including k-pop transliterations and Hangul
#   - album-title context patterns
#   - genre and mood synonym tables (text-relevance scoring)
#   - the genre → valence table used to estimate a user's mood
#   - search query templates and strategy fallbacks
#
# Everything is pure data plus a few lookup helpers.  Patterns are
# compiled once at import time.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import re

# ═════════════════════════════════════════════════════════════════════════
# 1. ARTIST-NAME PATTERNS
# ═════════════════════════════════════════════════════════════════════════
# Matched against lowercased artist names.  One name may hit several
# families ("Big Band Orchestra" → hip-hop, rock, classical).

ARTIST_NAME_PATTERNS: dict[str, list[re.Pattern[str]]] = {
    "electronic": [
        re.compile(r"\b(dj\s|dj$|\sdj\b|skrillex|deadmau5|tiësto|tiesto|armin|calvin harris)"),
        re.compile(r"\b(bass|step|trance|house|techno|dubstep)"),
    ],
    "hip-hop": [
        re.compile(r"(\bmc\s|\bmc$|\smc\b|\blil\s|\byoung\s|\bbig\s|\$|\brapper)"),
        re.compile(r"\b(gang|crew|mob|posse|squad)"),
    ],
    "rock": [
        re.compile(r"\b(band|group|boys|brothers|sisters|collective)"),
        re.compile(r"\b(metal|punk|grunge|indie|alternative)"),
    ],
    "classical": [
        re.compile(r"\b(orchestra|symphony|philharmonic|ensemble|quartet|trio)"),
        re.compile(r"\b(bach|mozart|beethoven|chopin|classical)"),
    ],
    "jazz": [
        re.compile(r"\b(jazz|swing|bebop|fusion|quintet|sextet)"),
    ],
    "country": [
        re.compile(r"\b(country|bluegrass|nashville|honky|outlaw)"),
    ],
    "pop": [
        re.compile(r"\b(pop|teen|idol|sensation|star)"),
    ],
    "k-pop": [
        re.compile(
            r"\b(bts|blackpink|twice|exo|seventeen|stray kids|newjeans|aespa|itzy"
            r"|le sserafim|red velvet|got7|nct|txt|enhypen|girls' generation)\b"
        ),
        re.compile(r"[\u1100-\u11ff\u3130-\u318f\uac00-\ud7af]"),
    ],
    "r&b": [
        re.compile(r"(\bsoul|\bmotown|\brhythm|\bblues|r&b)"),
    ],
    "latin": [
        re.compile(r"\b(salsa|merengue|bachata|reggaeton|mariachi|banda)"),
    ],
    "gospel": [
        re.compile(r"\b(choir|gospel|church|christian|praise|worship)"),
    ],
}


# ═════════════════════════════════════════════════════════════════════════
# 2. TRACK-TITLE CUES
# ═════════════════════════════════════════════════════════════════════════
# Plain substrings, checked against the lowercased title.

TITLE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("remix", "mix"), "electronic"),
    (("acoustic",), "acoustic"),
    (("live", "concert"), "live"),
    (("instrumental",), "instrumental"),
    (("cover",), "cover"),
]

# Romanized Korean that shows up in k-pop titles.
KPOP_TITLE_TERMS: tuple[str, ...] = (
    "k-pop", "kpop", "saranghae", "oppa", "unnie", "hyung",
    "annyeong", "aegyo", "daebak", "jagiya", "hwaiting",
)

# Hangul Jamo, Compatibility Jamo and Syllables.
HANGUL_RE = re.compile(r"[\u1100-\u11ff\u3130-\u318f\uac00-\ud7af]")


# ═════════════════════════════════════════════════════════════════════════
# 3. ALBUM CONTEXT PATTERNS
# ═════════════════════════════════════════════════════════════════════════

ALBUM_CONTEXT_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\b(greatest hits|anthology|collection|best of)"), "compilation"),
    (re.compile(r"\b(live|concert|acoustic|unplugged)"), "live"),
    (re.compile(r"\b(remix|mixed|dj|dance)"), "electronic"),
    (re.compile(r"\b(classical|symphony|concerto|sonata)"), "classical"),
]


# ═════════════════════════════════════════════════════════════════════════
# 4. SYNONYM TABLES
# ═════════════════════════════════════════════════════════════════════════

GENRE_SYNONYMS: dict[str, list[str]] = {
    "electronic": ["edm", "dance", "techno", "house", "trance", "dubstep", "electro"],
    "hip-hop": ["rap", "hiphop", "urban", "trap", "drill"],
    "rock": ["alternative", "indie rock", "classic rock", "hard rock", "metal"],
    "pop": ["mainstream", "top 40", "popular", "chart"],
    "jazz": ["smooth jazz", "bebop", "fusion", "swing"],
    "classical": ["orchestral", "symphony", "baroque", "romantic"],
    "country": ["folk", "americana", "bluegrass", "western"],
    "r&b": ["soul", "rnb", "rhythm and blues", "neo-soul"],
    "latin": ["latino", "hispanic", "spanish", "reggaeton"],
    "ambient": ["chill", "downtempo", "atmospheric", "meditation"],
    "k-pop": ["kpop", "korean", "k-pop hits", "idol"],
}

MOOD_SYNONYMS: dict[str, list[str]] = {
    "happy": ["upbeat", "cheerful", "joyful", "positive", "uplifting", "feel good"],
    "sad": ["melancholy", "emotional", "heartbreak", "blues", "sorrow", "tears"],
    "energetic": ["workout", "pump up", "high energy", "motivation", "intense", "power"],
    "chill": ["relaxed", "laid back", "mellow", "easy", "calm", "peaceful"],
    "romantic": ["love", "intimate", "date night", "romance", "heart", "passion"],
    "party": ["celebration", "dance", "nightlife", "club", "party time", "festivities"],
    "focus": ["concentration", "study", "work", "productivity", "instrumental", "background"],
    "nostalgic": ["throwback", "memories", "vintage", "classic", "retro", "old school"],
}


def get_genre_synonyms(genre: str) -> list[str]:
    """Return the synonym list for *genre* (empty for unknown genres)."""
    return GENRE_SYNONYMS.get(genre.lower(), [])


def get_mood_synonyms(mood: str) -> list[str]:
    """Return the synonym list for *mood* (empty for unknown moods)."""
    return MOOD_SYNONYMS.get(mood.lower(), [])


# ═════════════════════════════════════════════════════════════════════════
# 5. VALENCE TABLE
# ═════════════════════════════════════════════════════════════════════════
# Genre → signed pull on the user's estimated valence, applied in
# proportion to the genre's share of the user's listening.

GENRE_VALENCE_PULL: dict[str, float] = {
    "pop": 0.3,
    "dance": 0.3,
    "electronic": 0.3,
    "funk": 0.3,
    "blues": -0.2,
    "classical": -0.2,
    "ambient": -0.2,
    "folk": -0.2,
}

UPBEAT_MOODS = frozenset({"happy", "energetic"})
DOWNBEAT_MOODS = frozenset({"sad", "melancholy"})
MELLOW_MOODS = frozenset({"chill", "relaxed"})


# ═════════════════════════════════════════════════════════════════════════
# 6. SEARCH STRATEGY TABLES
# ═════════════════════════════════════════════════════════════════════════

# Tried in order per genre until one returns a usable candidate.
GENRE_QUERY_TEMPLATES: tuple[str, ...] = (
    '"{genre}" hits charts',
    "popular {genre} playlist",
    "{genre} top hits",
    "best {genre} songs",
    "{genre} music",
)

DEFAULT_GENRES: tuple[str, ...] = ("pop", "rock", "hip-hop", "electronic")

# Used when the user follows no artists.
EXAMPLE_ARTISTS: tuple[tuple[str, str], ...] = (
    ("example1", "Taylor Swift"),
    ("example2", "The Weeknd"),
    ("example3", "Dua Lipa"),
)

FILLER_MOODS: tuple[str, ...] = ("chill", "focus", "workout", "study")

SERENDIPITY_GENRE_POOL: tuple[str, ...] = (
    "jazz", "classical", "world", "folk", "reggae", "blues", "ambient", "experimental",
)
