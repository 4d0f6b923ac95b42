"""
Error taxonomy for the episode pipeline.

Every error carries a machine-checkable ``reason_code`` alongside its
human-readable message, so the HTTP layer and the orchestrator can report
failures without parsing strings.
"""

from typing import Any, Optional


class TigerError(Exception):
    """Base class for all pipeline errors."""

    reason_code: str = "TIGER_ERROR"

    def __init__(
        self,
        message: str,
        reason_code: Optional[str] = None,
        provider: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if reason_code:
            self.reason_code = reason_code
        self.provider = provider
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "reasonCode": self.reason_code,
            "message": str(self),
        }
        if self.provider:
            data["provider"] = self.provider
        if self.details:
            data["details"] = self.details
        return data


class ConfigurationError(TigerError):
    """Invalid or missing configuration (unknown platform, missing key)."""
    reason_code = "CONFIGURATION_ERROR"


class ProviderError(TigerError):
    """An upstream provider call failed."""

    reason_code = "PROVIDER_ERROR"

    def __init__(
        self,
        message: str,
        reason_code: Optional[str] = None,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        transient: bool = False,
        details: Optional[dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.transient = transient
        super().__init__(message, reason_code=reason_code, provider=provider, details=details)


class ExtractionError(TigerError):
    """Provider output could not be turned into the expected structure."""

    reason_code = "MALFORMED_RESPONSE"

    def __init__(self, message: str, fields: Optional[list[str]] = None, reason_code: Optional[str] = None):
        self.fields = fields or []
        super().__init__(message, reason_code=reason_code, details={"fields": self.fields} if self.fields else None)


class AnalysisError(TigerError):
    reason_code = "ANALYSIS_FAILED"


class GenerationError(TigerError):
    """A single image or text generation call failed."""
    reason_code = "GENERATION_FAILED"


class SynthesisError(TigerError):
    reason_code = "SYNTHESIS_FAILED"


class ComplianceCheckError(TigerError):
    """The compliance analysis itself could not be completed."""
    reason_code = "COMPLIANCE_CHECK_FAILED"


class SubmissionError(TigerError):
    """The video job could not be created."""
    reason_code = "VIDEO_SUBMISSION_FAILED"


class PollingTimeoutError(TigerError):
    """The video job never reached a terminal state within the poll ceiling."""

    reason_code = "VIDEO_POLLING_TIMEOUT"

    def __init__(self, message: str, job_id: str, attempts: int, provider: Optional[str] = None):
        self.job_id = job_id
        self.attempts = attempts
        super().__init__(
            message,
            provider=provider,
            details={
                "jobId": job_id,
                "attempts": attempts,
                "suggestion": f"Check the {provider or 'video provider'} dashboard for task {job_id}",
            },
        )


class RenderFailure(TigerError):
    """The video provider explicitly reported the job as failed."""

    reason_code = "VIDEO_RENDER_FAILED"

    def __init__(self, failure_reason: str, job_id: str, provider: Optional[str] = None):
        self.failure_reason = failure_reason
        self.job_id = job_id
        super().__init__(
            f"Video generation failed: {failure_reason}",
            provider=provider,
            details={"jobId": job_id, "failureReason": failure_reason},
        )
