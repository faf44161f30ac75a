"""Keyword emphasis table shared by the PDF layout, DOCX export and preview."""

import re

DEFAULT_KEYWORDS = (
    "React", "MERN", "MongoDB", "Node.js", "Express", "JWT",
    "Authentication", "REST API", "Tailwind", "MySQL", "Django",
    "JavaScript", "Python", "HTML", "CSS", "Bootstrap", "SQL",
    "Firebase", "Git", "GitHub", "API", "TypeScript", "Next.js",
    "Redux", "Vue", "Angular", "PostgreSQL", "Docker", "AWS",
    "data structure", "visualizer", "e-commerce", "website",
    "full-stack", "dynamic", "shopping cart", "checkout",
    "online learning platform", "responsive", "interface",
    "SQLite", "real time", "product management", "user authentication",
    "Node", "Scrum", "Agile",
)

PUNCTUATION = ".,!?;:()[]{}\"'"

_WHITESPACE = re.compile(r"\s+")


def clean_word(word: str) -> str:
    """Lower-case a word and strip surrounding punctuation."""
    return word.strip(PUNCTUATION).lower()


class EmphasisTable:
    """Decides which words of free text render in bold.

    Single-word keywords match a word exactly (case-insensitive, surrounding
    punctuation ignored). Multi-word phrases match a run of consecutive words
    and the whole run is emphasized.
    """

    def __init__(self, keywords=DEFAULT_KEYWORDS):
        self.keywords = tuple(k.strip() for k in keywords if k and k.strip())
        self.words = frozenset(
            clean_word(k) for k in self.keywords if len(k.split()) == 1
        )
        phrases = {
            tuple(clean_word(part) for part in k.split())
            for k in self.keywords
            if len(k.split()) > 1
        }
        self.phrases = tuple(sorted(phrases, key=len, reverse=True))

    @classmethod
    def from_config(cls, config: dict) -> "EmphasisTable":
        from config_loader import get_emphasis_keywords

        replacement, extra = get_emphasis_keywords(config)
        base = tuple(replacement) if replacement else DEFAULT_KEYWORDS
        return cls(base + tuple(extra))

    def is_keyword(self, word: str) -> bool:
        return clean_word(word) in self.words

    def emphasis_mask(self, words: list[str]) -> list[bool]:
        """Return one flag per word: True where the word renders bold."""
        cleaned = [clean_word(w) for w in words]
        mask = [c in self.words for c in cleaned]

        for phrase in self.phrases:
            n = len(phrase)
            for i in range(len(cleaned) - n + 1):
                if tuple(cleaned[i:i + n]) == phrase:
                    for j in range(i, i + n):
                        mask[j] = True
        return mask

    def split(self, text: str) -> list[tuple[str, bool]]:
        """Split text on whitespace into (word, emphasized) pairs."""
        words = _WHITESPACE.split(text.strip()) if text and text.strip() else []
        return list(zip(words, self.emphasis_mask(words)))
