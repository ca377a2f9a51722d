from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os


@dataclass(frozen=True)
class PathsConfig:
    """Path resolver for generated identicons and audit artifacts.

    ENV keys
    --------
    KSCOPE_OUTPUTS_DIR   → rendered PNG / GIF / montage   # [STORE:OVERWRITE]
    KSCOPE_ARTIFACTS_DIR → audit CSV/JSON, run logs       # [STORE:CUMULATIVE]
    """
    outputs_dir: Path | None = None    # [STORE:OVERWRITE]
    artifacts_dir: Path | None = None  # [STORE:CUMULATIVE]

    @staticmethod
    def from_env() -> "PathsConfig":
        return PathsConfig(
            outputs_dir=_opt_env("KSCOPE_OUTPUTS_DIR"),
            artifacts_dir=_opt_env("KSCOPE_ARTIFACTS_DIR"),
        )

    # explicit → ENV fallback
    def outputs(self) -> Path | None: return self.outputs_dir or _opt_env("KSCOPE_OUTPUTS_DIR")
    def artifacts(self) -> Path | None: return self.artifacts_dir or _opt_env("KSCOPE_ARTIFACTS_DIR")

    def resolve_out(self, value: str | None, kind: str = "outputs") -> Path:
        """CLI --out value, else the ENV directory, else an error."""
        if value:
            return Path(value)
        root = self.outputs() if kind == "outputs" else self.artifacts()
        if root is None:
            env = "KSCOPE_OUTPUTS_DIR" if kind == "outputs" else "KSCOPE_ARTIFACTS_DIR"
            raise ValueError(f"--out not given and {env} is not set")
        return root


def _opt_env(name: str) -> Path | None:
    v = os.getenv(name)
    return Path(v) if v else None


__all__ = ["PathsConfig"]
