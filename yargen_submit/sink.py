import sys
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .errors import OutputWriteError


def write_artifact(
    artifact: bytes,
    output: Optional[Union[str, Path]] = None,
    stream: Optional[BinaryIO] = None,
) -> None:
    """Write the rule set verbatim, to ``output`` if given, else to stdout."""
    if output:
        try:
            Path(output).write_bytes(artifact)
        except OSError as exc:
            raise OutputWriteError(f"Failed to write output: {exc}") from exc
        return

    out = stream if stream is not None else sys.stdout.buffer
    out.write(artifact)
    out.flush()
