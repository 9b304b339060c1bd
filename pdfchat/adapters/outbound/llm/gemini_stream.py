"""Streaming completions from Gemini over server-sent events.

Request-level failures are raised by ``stream_completion`` itself. Once it
returns, the caller holds a lazy iterator of text chunks that reads the
response body as it is consumed.
"""

import codecs
import logging
from collections.abc import Iterator

import pydantic
import requests

from ....config import settings
from ....core.domain.exceptions import (
    EmptyPromptError,
    LLMError,
    MissingAPIKeyError,
    NoResponseBodyError,
    StreamProtocolError,
    UpstreamHTTPError,
)
from ....core.ports.llm_port import LLMPort
from ...common.tracing import Observation, Tracer, get_tracer

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data: "
SSE_DONE = "[DONE]"
# Error bodies and answer previews recorded in traces are truncated to this length
TRACE_PREVIEW_CHARS = 2000


class _Part(pydantic.BaseModel):
    text: str | None = None


class _Content(pydantic.BaseModel):
    parts: list[_Part] = []


class _Candidate(pydantic.BaseModel):
    content: _Content | None = None


class StreamFrame(pydantic.BaseModel):
    """The subset of a ``GenerateContentResponse`` frame we read."""

    candidates: list[_Candidate] = []

    @property
    def text(self) -> str | None:
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text


def parse_sse_line(line: str) -> tuple[str | None, bool]:
    """Parse one SSE line.

    Returns:
        Tuple of (text, done). ``text`` is None for non-data lines, frames
        without text and malformed payloads. ``done`` is True for ``[DONE]``.
    """
    line = line.rstrip("\r")
    if not line.startswith(SSE_DATA_PREFIX):
        return None, False

    payload = line[len(SSE_DATA_PREFIX) :].strip()
    if payload == SSE_DONE:
        return None, True

    try:
        frame = StreamFrame.model_validate_json(payload)
    except pydantic.ValidationError as e:
        logger.warning("Failed to parse SSE data: %s", e.errors(include_url=False)[:1])
        return None, False

    return frame.text, False


class GeminiStreamClient(LLMPort):
    """Calls ``streamGenerateContent`` and yields text chunks."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout_seconds
        self._tracer = tracer

    @property
    def tracer(self) -> Tracer:
        if self._tracer is None:
            self._tracer = get_tracer()
        return self._tracer

    def stream_completion(self, prompt: str) -> Iterator[str]:
        """Open a completion stream for ``prompt``.

        Raises:
            EmptyPromptError: If the prompt is blank.
            MissingAPIKeyError: If no Gemini API key is configured.
            UpstreamHTTPError: If Gemini answers with a non-2xx status.
            NoResponseBodyError: If the response has no body to stream.
            LLMError: If the request could not be sent.
        """
        if not prompt.strip():
            raise EmptyPromptError()
        if not self.api_key:
            raise MissingAPIKeyError()

        observation = self.tracer.start_generation(
            "gemini.streamGenerateContent",
            model=self.model,
            input={"promptLength": len(prompt)},
            metadata={"endpoint": "streamGenerateContent"},
        )

        url = f"{self.base_url}/models/{self.model}:streamGenerateContent?alt=sse&key={self.api_key}"
        try:
            response = requests.post(
                url,
                json={"contents": [{"parts": [{"text": prompt}]}]},
                stream=True,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            observation.failure(str(e))
            raise LLMError(f"Failed to reach Gemini: {e}", cause=e) from e

        if not response.ok:
            body = response.text
            response.close()
            observation.failure(
                f"HTTP {response.status_code}",
                output={"error": body[:TRACE_PREVIEW_CHARS]},
                status=response.status_code,
            )
            raise UpstreamHTTPError(response.status_code, body)

        if response.raw is None:
            response.close()
            observation.failure("No response body received")
            raise NoResponseBodyError()

        logger.debug("Opened Gemini stream for %d char prompt", len(prompt))
        return self._iter_text(response, observation)

    def _iter_text(self, response: requests.Response, observation: Observation) -> Iterator[str]:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        buffer = ""
        aggregated: list[str] = []
        finished = False

        try:
            for chunk in response.iter_content(chunk_size=None):
                buffer += decoder.decode(chunk)
                # Keep the trailing partial line for the next chunk
                *lines, buffer = buffer.split("\n")
                for line in lines:
                    text, done = parse_sse_line(line)
                    if done:
                        finished = True
                        return
                    if text:
                        aggregated.append(text)
                        yield text

            buffer += decoder.decode(b"", final=True)
            if buffer:
                text, _ = parse_sse_line(buffer)
                if text:
                    aggregated.append(text)
                    yield text
            finished = True
        except requests.RequestException as e:
            logger.error("Stream reading error: %s", e)
            observation.failure(str(e))
            raise StreamProtocolError(f"Stream reading error: {e}", cause=e) from e
        finally:
            if finished:
                answer = "".join(aggregated)
                observation.success(
                    output={
                        "textLength": len(answer),
                        "textPreview": answer[:TRACE_PREVIEW_CHARS],
                    }
                )
            else:
                # Consumer closed the iterator early
                observation.warning("Client cancelled stream")
            try:
                response.close()
            except Exception as e:
                logger.debug("Ignoring error while closing Gemini stream: %s", e)
