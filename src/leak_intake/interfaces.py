"""Abstract interfaces for the external collaborators.

These ABCs define the contract the pipeline and ledger depend on.  The SDK
ships production implementations (``GeminiClient`` and ``EmailJSRelay``);
tests substitute in-memory stubs.

Typical wiring::

    client: GenerativeClient = GeminiClient(api_key=..., model=...)
    pipeline = AnalysisPipeline(client, PromptManager(catalog))

    relay: NotificationRelay = EmailJSRelay(service_id=..., ...)
    ledger = LeadLedger(relay)
"""

from abc import ABC, abstractmethod

from leak_intake.models.request import GenerationRequest, NotificationPayload


class GenerativeClient(ABC):
    """Interface for the generative analysis service.

    The service is a black box: this system owns only request construction
    and response validation.  Implementations return the raw text body of
    the reply and raise ``TransportError`` on connection problems, timeouts
    or an empty reply.
    """

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> str:
        """Send one request and return the reply text.

        Parameters
        ----------
        request:
            Instruction, inline images, and an optional response schema.

        Returns
        -------
        str
            The raw reply, expected to be a JSON document when a schema is
            declared.  Parsing and validation are the caller's job.
        """
        ...


class NotificationRelay(ABC):
    """Interface for the e-mail relay used on consultation submission.

    No response contract is consumed beyond success/failure: implementations
    return ``None`` on success and raise on any failure.
    """

    @abstractmethod
    async def send(self, payload: NotificationPayload) -> None:
        ...
