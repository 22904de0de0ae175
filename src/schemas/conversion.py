"""Pydantic models for conversion input and output.

InputDocument is what callers hand to the pipeline; ConversionResult is the
only value the pipeline ever hands back.
"""
import base64
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import ConversionState, ErrorKind


class InputDocument(BaseModel):
    """An uploaded document held in memory."""
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(default=b"", description="Raw document bytes")
    media_type: str = Field(default="application/pdf", description="Declared MIME type")
    name: Optional[str] = Field(default=None, description="Original filename, if known")

    @classmethod
    def from_path(cls, path: Path) -> "InputDocument":
        """Read a PDF from disk into an InputDocument."""
        path = Path(path)
        return cls(data=path.read_bytes(), media_type="application/pdf", name=path.name)

    @property
    def size(self) -> int:
        return len(self.data)


class ConversionResult(BaseModel):
    """Outcome of one conversion call.

    Exactly one of (image_bytes + file_name) or error is set.
    """
    image_bytes: Optional[bytes] = Field(default=None, description="Encoded raster image")
    file_name: Optional[str] = Field(default=None, description="Name for the packaged image file")
    media_type: str = Field(default="image/png", description="MIME type of image_bytes")
    error: Optional[ErrorKind] = Field(default=None, description="Failure category, if any")
    error_message: Optional[str] = Field(default=None, description="Human-readable failure description")

    state: ConversionState = Field(default=ConversionState.DONE, description="Terminal pipeline state")
    failed_stage: Optional[ConversionState] = Field(
        default=None,
        description="State the pipeline was in when it failed"
    )
    width: Optional[int] = Field(default=None, ge=1, description="Rendered width in pixels")
    height: Optional[int] = Field(default=None, ge=1, description="Rendered height in pixels")
    page_count: Optional[int] = Field(default=None, ge=1, description="Pages in the source document")
    timings: Dict[str, Any] = Field(default_factory=dict, description="Per-stage timing data")

    @model_validator(mode="after")
    def _check_exclusive(self) -> "ConversionResult":
        has_image = bool(self.image_bytes) and bool(self.file_name)
        has_partial_image = self.image_bytes is not None or self.file_name is not None
        if self.error is None and not has_image:
            raise ValueError("result must carry image_bytes and file_name when error is absent")
        if self.error is not None and has_partial_image:
            raise ValueError("failed result must not carry image_bytes or file_name")
        expected = ConversionState.DONE if self.error is None else ConversionState.FAILED
        if self.state != expected:
            raise ValueError(f"result state must be {expected.value}, got {self.state.value}")
        return self

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        failed_stage: Optional[ConversionState] = None,
        **extra: Any,
    ) -> "ConversionResult":
        return cls(
            error=kind,
            error_message=message,
            state=ConversionState.FAILED,
            failed_stage=failed_stage,
            **extra,
        )

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def image_url(self) -> str:
        """Displayable data URL for the image, or "" on failure."""
        if not self.image_bytes:
            return ""
        encoded = base64.b64encode(self.image_bytes).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"

    def save(self, path: Path) -> Path:
        """Write image bytes to *path* (a directory gets file_name appended)."""
        if not self.ok:
            raise ValueError(f"Cannot save failed conversion: {self.error_message}")
        path = Path(path)
        if path.is_dir():
            path = path / self.file_name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.image_bytes)
        return path
