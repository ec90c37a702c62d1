"""
Provider JSON -> canonical `Movie`.

Every function here is total: missing or malformed upstream fields degrade to a
named sentinel (`0.0` rating, `0` votes, `()` genres, `NO_PLOT`, `None` poster)
instead of raising. The display helpers at the bottom are equally forgiving and
render `"N/A"` for anything they cannot format.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Mapping

from cinemax.config import TMDB_IMAGE_BASE_URL, Provider
from cinemax.models import NO_PLOT, Movie, MovieExtras

NA = "N/A"
ADULT_RATINGS = frozenset({"R", "NC-17", "X"})

TMDB_MOVIE_GENRES: dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}

_YEAR_RE = re.compile(r"^\s*([0-9]{4})")
_YEAR_RANGE_SEP_RE = re.compile(r"[–—-]")
_ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


# --- field parsers ---


def _clean_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or text == NA:
        return None
    return text


def parse_rating(value: Any) -> float:
    """Rating on a 0-10 scale; `"N/A"`, blanks, non-numerics and NaN all give 0.0."""

    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = _clean_str(value)
        if text is None:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return min(max(number, 0.0), 10.0)


def parse_vote_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0) if math.isfinite(value) else 0
    text = _clean_str(value)
    if text is None:
        return 0
    digits = text.replace(",", "")
    return int(digits) if digits.isdigit() else 0


def parse_optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = _clean_str(value)
    if text is None:
        return None
    digits = text.replace(",", "").replace("$", "")
    return int(digits) if digits.isdigit() else None


def parse_genres(value: Any) -> tuple[str, ...]:
    text = _clean_str(value)
    if text is None:
        return ()
    return tuple(g.strip() for g in text.split(", ") if g.strip())


def parse_ratings(value: Any) -> tuple[tuple[str, str], ...]:
    """OMDb `Ratings` list as `(source, value)` pairs; malformed entries are skipped."""

    if not isinstance(value, list):
        return ()
    pairs: list[tuple[str, str]] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        source = _clean_str(entry.get("Source"))
        rating = _clean_str(entry.get("Value"))
        if source and rating:
            pairs.append((source, rating))
    return tuple(pairs)


def parse_year(value: Any) -> str | None:
    """First year of `"2010"`, `"2019–"` or `"2008–2013"`."""

    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:04d}" if value > 0 else None
    text = _clean_str(value)
    if text is None:
        return None
    head = _YEAR_RANGE_SEP_RE.split(text, maxsplit=1)[0].strip()
    return head if len(head) == 4 and head.isdigit() else None


def parse_release_date(released: Any, year: Any = None) -> str:
    """
    ISO `YYYY-MM-DD` from an OMDb/TMDb release field, falling back to `{year}-01-01`.

    Returns an empty string when neither yields anything usable.
    """

    text = _clean_str(released)
    if text is not None:
        if _ISO_DATE_RE.match(text):
            return text
        for fmt in ("%d %b %Y", "%b %d, %Y", "%d %B %Y", "%B %d, %Y"):
            try:
                return datetime.strptime(text, fmt).date().isoformat()
            except ValueError:
                continue
        year_only = parse_year(text)
        if year_only and len(text) == 4:
            return f"{year_only}-01-01"

    year_str = parse_year(year)
    if year_str:
        return f"{year_str}-01-01"
    return text or ""


def parse_language(value: Any) -> str:
    text = _clean_str(value)
    if text is None:
        return "en"
    first = text.split(",")[0].strip().lower()
    return first or "en"


def is_adult_rating(rated: Any) -> bool:
    return isinstance(rated, str) and rated.strip() in ADULT_RATINGS


def resolve_image_url(path: Any, base_url: str = TMDB_IMAGE_BASE_URL) -> str | None:
    text = _clean_str(path)
    if text is None:
        return None
    if text.startswith(("http://", "https://")):
        return text
    return f"{base_url.rstrip('/')}/{text.lstrip('/')}"


# --- provider mappers ---


def _names(items: Any, key: str = "name", *, limit: int | None = None) -> list[str]:
    if not isinstance(items, list):
        return []
    names = [str(i[key]).strip() for i in items if isinstance(i, Mapping) and isinstance(i.get(key), str)]
    names = [n for n in names if n]
    return names[:limit] if limit is not None else names


def _tmdb_genres(raw: Mapping[str, Any]) -> tuple[str, ...]:
    detailed = _names(raw.get("genres"))
    if detailed:
        return tuple(detailed)
    ids = raw.get("genre_ids")
    if not isinstance(ids, list):
        return ()
    return tuple(TMDB_MOVIE_GENRES[i] for i in ids if isinstance(i, int) and i in TMDB_MOVIE_GENRES)


def _tmdb_extras(raw: Mapping[str, Any]) -> MovieExtras:
    credits = raw.get("credits")
    if not isinstance(credits, Mapping):
        credits = {}
    crew = credits.get("crew")
    if not isinstance(crew, list):
        crew = []
    directors = [
        str(c.get("name")).strip()
        for c in crew
        if isinstance(c, Mapping) and c.get("job") == "Director" and c.get("name")
    ]
    writers = [
        str(c.get("name")).strip()
        for c in crew
        if isinstance(c, Mapping) and c.get("department") == "Writing" and c.get("name")
    ]
    actors = _names(credits.get("cast"), limit=5)

    runtime = raw.get("runtime")
    runtime_str = f"{runtime} min" if isinstance(runtime, int) and not isinstance(runtime, bool) and runtime > 0 else None

    return MovieExtras(
        runtime=runtime_str,
        director=", ".join(dict.fromkeys(directors)) or None,
        writer=", ".join(dict.fromkeys(writers)) or None,
        actors=", ".join(actors) or None,
        production=", ".join(_names(raw.get("production_companies"))) or None,
        country=", ".join(_names(raw.get("production_countries"))) or None,
        language=", ".join(_names(raw.get("spoken_languages"), key="english_name")) or None,
        budget=parse_optional_int(raw.get("budget")) or None,
        revenue=parse_optional_int(raw.get("revenue")) or None,
        tagline=_clean_str(raw.get("tagline")),
        imdb_id=_clean_str(raw.get("imdb_id")),
    )


def normalize_tmdb_movie(raw: Mapping[str, Any], *, image_base_url: str = TMDB_IMAGE_BASE_URL) -> Movie:
    raw_id = raw.get("id")
    title = _clean_str(raw.get("title")) or _clean_str(raw.get("original_title")) or ""
    popularity = raw.get("popularity")
    return Movie(
        id=str(raw_id).strip() if raw_id is not None else "",
        title=title,
        poster_url=resolve_image_url(raw.get("poster_path"), image_base_url),
        backdrop_url=resolve_image_url(raw.get("backdrop_path"), image_base_url),
        release_date=parse_release_date(raw.get("release_date")),
        vote_average=parse_rating(raw.get("vote_average")),
        vote_count=parse_vote_count(raw.get("vote_count")),
        popularity=float(popularity) if isinstance(popularity, (int, float)) and math.isfinite(popularity) else 0.0,
        adult=raw.get("adult") is True,
        original_language=parse_language(raw.get("original_language")),
        genres=_tmdb_genres(raw),
        overview=_clean_str(raw.get("overview")) or NO_PLOT,
        extras=_tmdb_extras(raw),
    )


def normalize_omdb_movie(raw: Mapping[str, Any]) -> Movie:
    rating = parse_rating(raw.get("imdbRating"))
    votes = parse_vote_count(raw.get("imdbVotes"))
    poster = resolve_image_url(raw.get("Poster"))
    rated = _clean_str(raw.get("Rated"))
    return Movie(
        id=str(raw.get("imdbID") or "").strip(),
        title=_clean_str(raw.get("Title")) or "",
        poster_url=poster,
        backdrop_url=poster,
        release_date=parse_release_date(raw.get("Released"), raw.get("Year")),
        vote_average=rating,
        vote_count=votes,
        popularity=rating * votes / 1000,
        adult=is_adult_rating(rated),
        original_language=parse_language(raw.get("Language")),
        genres=parse_genres(raw.get("Genre")),
        overview=_clean_str(raw.get("Plot")) or NO_PLOT,
        extras=MovieExtras(
            rated=rated,
            runtime=_clean_str(raw.get("Runtime")),
            director=_clean_str(raw.get("Director")),
            writer=_clean_str(raw.get("Writer")),
            actors=_clean_str(raw.get("Actors")),
            awards=_clean_str(raw.get("Awards")),
            metascore=parse_optional_int(raw.get("Metascore")),
            box_office=_clean_str(raw.get("BoxOffice")),
            production=_clean_str(raw.get("Production")),
            country=_clean_str(raw.get("Country")),
            language=_clean_str(raw.get("Language")),
            imdb_id=_clean_str(raw.get("imdbID")),
            ratings=parse_ratings(raw.get("Ratings")),
        ),
    )


def normalize_movie(raw: Mapping[str, Any], provider: Provider, *, image_base_url: str = TMDB_IMAGE_BASE_URL) -> Movie:
    if provider is Provider.OMDB:
        return normalize_omdb_movie(raw)
    return normalize_tmdb_movie(raw, image_base_url=image_base_url)


# --- display formatting ---


def format_rating(value: float | None) -> str:
    if not value:
        return NA
    return f"{value:.1f}"


def format_vote_count(value: int | None) -> str:
    if not value:
        return NA
    return f"{value:,}"


def format_release_year(release_date: str | None) -> str:
    match = _YEAR_RE.match(release_date or "")
    return match.group(1) if match else NA


def format_release_date(release_date: str | None) -> str:
    try:
        parsed = date.fromisoformat((release_date or "").strip())
    except ValueError:
        return NA
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def format_runtime(runtime: str | int | None) -> str:
    if runtime is None or runtime == NA or runtime == "":
        return NA
    if isinstance(runtime, int):
        minutes = runtime
    else:
        digits = runtime.replace(" min", "").strip()
        if not digits.isdigit():
            return runtime
        minutes = int(digits)
    return f"{minutes // 60}h {minutes % 60}m"


def format_money(amount: str | int | None) -> str:
    if amount is None or amount == NA or amount == "":
        return NA
    value = amount if isinstance(amount, int) else parse_optional_int(amount)
    if value is None:
        return str(amount)
    if value <= 0:
        return NA
    if value >= 1_000_000_000:
        return f"${value / 1_000_000_000:.1f}B"
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    return f"${value:,}"
