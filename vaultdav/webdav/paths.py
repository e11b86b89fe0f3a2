from typing import Optional


def resolve_location(root: str, token: Optional[int] = None, name: Optional[str] = None) -> str:
    """Join root, token and resource name into one remote path."""
    segments = [root]
    if token is not None:
        segments.append(str(token))
    if name is not None:
        segments.append(name)
    return "/".join(segments)
