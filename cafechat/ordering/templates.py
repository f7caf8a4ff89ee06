# cafechat/ordering/templates.py
from __future__ import annotations

import re
from typing import Any, List, Optional, Sequence, Union

# positional placeholders in dialog replies: "{0}", "{1}", ...
_PARAM_RE = re.compile(r"\{(\d+)\}")


def replace_params(
    original: Optional[Union[str, Sequence[str]]],
    args: Optional[Sequence[Any]],
) -> Optional[Union[str, Sequence[str], List[str]]]:
    """
    Join the reply fragments with single spaces and fill "{n}" from args[n].
    Placeholders without a matching arg are left as they are.
    Returns [filled_text], or `original` untouched when either input is missing.
    """
    if original is None or args is None:
        return original

    fragments = [original] if isinstance(original, str) else list(original)
    text = " ".join(str(f) for f in fragments)

    def _sub(m: re.Match) -> str:
        i = int(m.group(1))
        if i < len(args) and args[i] is not None:
            return str(args[i])
        return m.group(0)

    return [_PARAM_RE.sub(_sub, text)]
