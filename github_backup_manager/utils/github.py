"""Contains utility functions for GitHub repository identifiers."""


def split_repository_identifier(repository_id: str) -> tuple[str, str]:
    """Splits an 'owner/name' repository identifier into owner and name.

    Raises ValueError for anything that could escape the backup directory
    when joined onto it.
    """
    parts = repository_id.split("/")
    if len(parts) != 2 or not all(parts) or any(part in (".", "..") for part in parts):
        raise ValueError(f"Repository must be in the format 'owner/name', got '{repository_id}'")
    owner, name = parts
    return owner, name
