CODE_EXTENSIONS = {
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".py",
    ".go",
    ".rs",
    ".java",
    ".c",
    ".cpp",
    ".h",
    ".cs",
    ".rb",
    ".php",
    ".swift",
    ".kt",
    ".scala",
    ".vue",
    ".svelte",
}


def is_code_file(file_name: str) -> bool:
    # Files without an extension (Makefile, Dockerfile) count as non-code.
    base = file_name.rsplit("/", 1)[-1]
    if "." not in base:
        return False
    return "." + base.rsplit(".", 1)[-1].lower() in CODE_EXTENSIONS


def has_code_changes(file_names: list[str]) -> bool:
    return any(is_code_file(name) for name in file_names)
