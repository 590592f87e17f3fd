LANGUAGE_BY_EXTENSION = {
    ".go": "go",
    ".py": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".java": "java",
    ".kt": "kotlin",
    ".rs": "rust",
    ".rb": "ruby",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".swift": "swift",
    ".php": "php",
    ".scala": "scala",
    ".sql": "sql",
    ".sh": "bash",
}

_DISPLAY_NAMES = {
    "go": "Go",
    "python": "Python",
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "java": "Java",
    "kotlin": "Kotlin",
    "rust": "Rust",
    "ruby": "Ruby",
    "c": "C",
    "cpp": "C++",
    "csharp": "C#",
    "swift": "Swift",
    "php": "PHP",
    "scala": "Scala",
    "sql": "SQL",
    "bash": "Bash",
}


def detect_language(file_name: str, default: str = "go") -> str:
    """Return the fence language tag for a source file, by extension."""
    lowered = file_name.lower()
    for ext, language in LANGUAGE_BY_EXTENSION.items():
        if lowered.endswith(ext):
            return language
    return default


def display_name(language: str) -> str:
    return _DISPLAY_NAMES.get(language.lower(), language.capitalize())
