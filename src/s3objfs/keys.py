import re


def validate_prefix(prefix):
    """Strip trailing slashes and reject unsafe key prefixes."""
    prefix = prefix.rstrip("/") if prefix else ""
    if prefix:
        if not re.fullmatch(r"[a-zA-Z0-9._/-]*", prefix):
            raise ValueError(
                f"prefix contains invalid characters: {prefix!r}. "
                "Only alphanumeric characters, dots, hyphens, underscores, "
                "and slashes are allowed."
            )
        if ".." in prefix:
            raise ValueError(f"prefix must not contain '..': {prefix!r}")
    return prefix


def full_key(prefix, key):
    if prefix:
        return f"{prefix}/{key}"
    return key
