"""URI Template — level-1 templates such as `greeting://{name}`.

Invariants:
    - Only simple `{var}` expressions; operators (`{+var}`, `{?q}`) are rejected
    - A variable matches one non-empty segment: no `/`, `?` or `#`
    - match() percent-decodes values
    - Variable names are unique within a template

Design Decisions:
    - Compiled regex per template, built once at registration time
"""

import re
from urllib.parse import unquote


_EXPRESSION = re.compile(r"\{([^{}]*)\}")
_VARNAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class UriTemplate:
    """A parsed level-1 URI template."""

    def __init__(self, template: str):
        self.template = template
        self.variables: list[str] = []
        pattern = ["^"]
        pos = 0
        for expr in _EXPRESSION.finditer(template):
            name = expr.group(1)
            if not _VARNAME.match(name):
                raise ValueError(
                    f"Unsupported URI template expression '{{{name}}}' in '{template}'"
                )
            if name in self.variables:
                raise ValueError(f"Duplicate URI template variable '{name}'")
            self.variables.append(name)
            pattern.append(re.escape(template[pos:expr.start()]))
            pattern.append(f"(?P<{name}>[^/?#]+)")
            pos = expr.end()
        literal_tail = template[pos:]
        if "{" in literal_tail or "}" in literal_tail:
            raise ValueError(f"Unbalanced braces in URI template '{template}'")
        pattern.append(re.escape(literal_tail))
        pattern.append("$")
        self._regex = re.compile("".join(pattern))

    def match(self, uri: str) -> dict[str, str] | None:
        """Variables extracted from `uri`, or None when it does not match."""
        m = self._regex.match(uri)
        if m is None:
            return None
        return {name: unquote(value) for name, value in m.groupdict().items()}

    def __repr__(self) -> str:
        return f"UriTemplate({self.template!r})"
