"""Built-in vocabulary shipped with the engine.

"cms" is registered as a broad-category term of "wordpress", not a synonym:
a CMS mention alone is enough for loose mode but never for moderate mode.
"""

from .models import VocabularyEntry, VocabularyTable

_RAW_VOCABULARY = {
    "developer": {
        "synonyms": ["dev", "programmer", "coder", "software engineer", "engineer"],
        "categories": ["development", "software", "web", "frontend", "backend"],
    },
    "engineer": {
        "synonyms": ["developer", "programmer", "software engineer", "swe"],
        "categories": ["engineering", "software", "technical"],
    },
    "programmer": {
        "synonyms": ["developer", "coder", "dev"],
        "categories": ["programming", "software", "coding"],
    },
    "wordpress": {
        "synonyms": ["wp", "wordpress dev", "wp dev", "woocommerce", "elementor", "gutenberg"],
        "categories": ["cms", "content management", "php", "web development", "website"],
    },
    "php": {
        "synonyms": ["laravel", "symfony"],
        "categories": ["backend", "web development", "wordpress"],
    },
    "web": {
        "synonyms": ["website", "web development"],
        "categories": ["frontend", "backend", "fullstack", "html", "css", "javascript", "php", "cms"],
    },
    "frontend": {
        "synonyms": ["front-end", "front end", "ui developer"],
        "categories": ["react", "vue", "angular", "javascript", "css", "html"],
    },
    "backend": {
        "synonyms": ["back-end", "back end", "server-side"],
        "categories": ["api", "database", "node", "python", "java", "php"],
    },
    "fullstack": {
        "synonyms": ["full-stack", "full stack"],
        "categories": ["frontend", "backend", "web"],
    },
    "react": {
        "synonyms": ["reactjs", "react.js", "react native"],
        "categories": ["javascript", "frontend", "typescript"],
    },
    "javascript": {
        "synonyms": ["js", "ecmascript", "typescript", "node.js", "nodejs"],
        "categories": ["frontend", "web", "react", "vue", "angular"],
    },
    "python": {
        "synonyms": ["django", "flask", "fastapi"],
        "categories": ["backend", "data", "scripting", "machine learning"],
    },
    "designer": {
        "synonyms": ["ui designer", "ux designer", "graphic designer", "visual designer"],
        "categories": ["design", "figma", "ui", "ux", "creative"],
    },
    "writer": {
        "synonyms": ["copywriter", "content writer", "author", "blogger"],
        "categories": ["content", "editing", "copy", "seo"],
    },
    "marketing": {
        "synonyms": ["marketer", "growth", "digital marketing"],
        "categories": ["seo", "social media", "ads", "content", "campaign"],
    },
    "manager": {
        "synonyms": ["lead", "head of", "director"],
        "categories": ["management", "leadership", "team"],
    },
    "data": {
        "synonyms": ["analytics", "data science"],
        "categories": ["sql", "python", "machine learning", "bi"],
    },
    "devops": {
        "synonyms": ["sre", "site reliability", "platform engineer"],
        "categories": ["kubernetes", "docker", "aws", "terraform", "ci/cd", "cloud"],
    },
}


def build_default_vocabulary() -> VocabularyTable:
    """Vocabulary table built from the shipped term list."""
    return VocabularyTable(
        {
            term: VocabularyEntry.of(raw_entry.get("synonyms"), raw_entry.get("categories"))
            for term, raw_entry in _RAW_VOCABULARY.items()
        }
    )


DEFAULT_VOCABULARY = build_default_vocabulary()
