"""Keyword heuristic used when the content classifier is not available."""

import re
import unicodedata

from .models import ModerationInput, ModerationVerdict

DENYLIST = (
    "explicit",
    "nude",
    "sex",
    "porn",
    "violence",
    "kill",
    "hate",
    "fuck",
    "shit",
    "damn",
    "blasphemy",
    "blaspheme",
)

GOSPEL_TERMS = (
    # Core names and worship
    "jesus", "christ", "god", "lord", "prayer", "worship", "praise", "gospel",
    "bible", "scripture", "faith", "church", "sermon", "hymn", "devotional",
    "blessing", "amen", "hallelujah", "hosanna",
    # Scriptural and theological language used by sermons
    "salvation", "redemption", "repentance", "resurrection", "holy spirit",
    "spirit of god", "covenant", "grace", "righteousness", "righteous",
    "sinner", "saved", "obey", "law of moses", "law of the lord", "father",
    "eternal life", "kingdom of god", "kingdom of heaven",
    "word of god", "word of the lord", "testimony", "testify", "preach",
    "pastor", "minister", "congregation", "altar", "born again",
    "sanctification", "glorify", "glory", "prophet", "prophecy", "disciple",
    "apostle", "parable", "psalm", "proverb", "obedience", "commandment",
    "cross", "crucified", "risen", "ascension", "pentecost", "trinity",
    "comforter", "shepherd", "lamb of god", "bread of life",
    "light of the world", "alpha and omega", "immanuel", "emmanuel",
    "son of god", "only begotten", "messiah", "yahweh", "yehovah",
    # Books and figures
    "genesis", "exodus", "romans", "corinthians", "galatians", "ephesians",
    "philippians", "colossians", "hebrews", "revelation", "isaiah",
    "jeremiah", "matthew", "luke", "john", "peter", "paul", "moses", "david",
    "daniel", "abraham", "solomon", "elijah",
    "elisha", "nehemiah", "ezekiel", "zechariah", "malachi",
    # Yoruba
    "jésù", "jésu", "olúwa", "oluwa", "ọlọrun", "olorun", "ìwòrìpò",
    "iworipo", "àdúrà", "adura", "ìgbàgbọ", "igbagbo",
    # Hausa
    "yesu", "ubangiji", "allah", "addu'a", "ibada",
    # Igbo
    "jisos", "chiukwu", "ekpere", "abụ",
)


def _word_start_pattern(terms: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(
        re.escape(unicodedata.normalize("NFC", term)) for term in terms
    )
    return re.compile(rf"(?<!\w)(?:{alternatives})")


_DENYLIST_PATTERN = _word_start_pattern(DENYLIST)
_GOSPEL_PATTERN = _word_start_pattern(GOSPEL_TERMS)


def keyword_verdict(request: ModerationInput) -> ModerationVerdict:
    """
    Classifies an upload by denylisted and gospel terms in its text.

    A denylisted term always rejects. A gospel term approves only when no
    denylisted term is present. Text with neither is held for review.
    """
    text = unicodedata.normalize("NFC", request.searchable_text())

    if _DENYLIST_PATTERN.search(text):
        return ModerationVerdict(
            is_approved=False,
            confidence=0.7,
            reason="Inappropriate keywords detected",
            flags=frozenset({"inappropriate_keywords"}),
            requires_review=False,
        )

    if _GOSPEL_PATTERN.search(text):
        return ModerationVerdict(
            is_approved=True,
            confidence=0.6,
            reason="Gospel keywords detected",
            requires_review=False,
        )

    return ModerationVerdict(
        is_approved=False,
        confidence=0.4,
        reason="Unable to determine content type - requires review",
        flags=frozenset({"unclear_content"}),
        requires_review=True,
    )
