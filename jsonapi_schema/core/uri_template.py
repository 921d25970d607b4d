"""URI Template Builder — turns a route path pattern into an RFC 6570 href.

Invariants:
    - Parameter segments are marked by a leading ":" in the pattern
    - Parameters are returned in order of appearance
    - Prefix and path are joined with path-join semantics: empty segments collapse
    - Pure and idempotent: identical input always yields identical output
"""

from dataclasses import dataclass

PARAMETER_SIGIL = ":"


@dataclass(frozen=True)
class PathSegment:
    """One segment of a route path: static text or a named parameter."""
    value: str
    is_parameter: bool = False

    def render(self) -> str:
        return f"{{{self.value}}}" if self.is_parameter else self.value


@dataclass(frozen=True)
class UriTemplate:
    """Templated href plus the ordered parameter names it references."""
    href: str
    parameters: tuple[str, ...]


def parse_path(pattern: str) -> tuple[PathSegment, ...]:
    """Split a path pattern into static and parameter segments."""
    segments = []
    for part in pattern.split("/"):
        if not part:
            continue
        if part.startswith(PARAMETER_SIGIL) and len(part) > 1:
            segments.append(PathSegment(part[1:], is_parameter=True))
        else:
            segments.append(PathSegment(part))
    return tuple(segments)


def path_parameters(pattern: str) -> tuple[str, ...]:
    return tuple(s.value for s in parse_path(pattern) if s.is_parameter)


def join_path(prefix: str, path: str) -> str:
    """Join prefix and path the way a filesystem path join would."""
    if not prefix:
        return path
    if path.startswith("/"):
        return prefix.rstrip("/") + path
    return f"{prefix.rstrip('/')}/{path}"


def build_uri_template(prefix: str, path: str) -> UriTemplate:
    """Build the templated href for `path` under the API-wide `prefix`."""
    joined = join_path(prefix or "", path)
    segments = parse_path(joined)
    rendered = "/".join(s.render() for s in segments)
    href = f"/{rendered}" if joined.startswith("/") else rendered
    return UriTemplate(
        href=href,
        parameters=tuple(s.value for s in segments if s.is_parameter),
    )
