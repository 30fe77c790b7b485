"""
Failover Controller - credential rotation for one inbound request

State Machine:
    SELECTING:      rank every credential with the selection policy
    ATTEMPTING:     call the executor with the next unused credential;
                    success -> VALIDATING, failure -> next credential or
                    DONE_EXHAUSTED when none remain
    VALIDATING:     run the output policy once; on violation regenerate once
                    with the same credential and context, then accept
    DONE_SUCCESS:   return the reply
    DONE_EXHAUSTED: raise ExhaustionError carrying every attempt's failure

The automaton is acyclic apart from ATTEMPTING's walk over the attempt
order, so a request makes at most N attempts plus one regeneration.

Regeneration fallback: if the regeneration call itself fails, the original
(flagged) reply is returned. The failed regeneration still stamps the
credential's health record like any other failed attempt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from src.core.config import Settings
from src.core.exceptions import ExhaustionError, NormalizedError
from src.models.domain import LANGUAGE_POLICY, ConversationContext, ConversationTurn
from src.observability.logging import get_logger
from src.providers.base import ChatCompletionClient
from src.providers.fake import FakeChatClient
from src.providers.github_models import GitHubModelsClient
from src.resilience import metrics
from src.resilience.credential_pool import CredentialPool
from src.resilience.selection import SelectionPolicy
from src.services.executor import AttemptSuccess, RequestExecutor
from src.services.output_policy import AllowAllValidator, EnglishOnlyValidator, OutputValidator

logger = get_logger(__name__)


class FailoverState(str, Enum):
    """States of a single request's failover run."""

    SELECTING = "selecting"
    ATTEMPTING = "attempting"
    VALIDATING = "validating"
    DONE_SUCCESS = "done_success"
    DONE_EXHAUSTED = "done_exhausted"


@dataclass(frozen=True)
class FailoverOutcome:
    """
    Successful result of a failover run.

    Attributes:
        text: Reply returned to the caller.
        credential_index: Pool index of the credential that produced it.
        attempts: Credentials tried, including the successful one.
        regenerated: Whether the output policy triggered a regeneration.
    """

    text: str
    credential_index: int
    attempts: int
    regenerated: bool = False


@dataclass
class _Run:
    """Mutable bookkeeping for one run; never shared between requests."""

    context: ConversationContext
    state: FailoverState = FailoverState.SELECTING
    order: tuple[int, ...] = ()
    position: int = 0
    index: Optional[int] = None
    text: Optional[str] = None
    regenerated: bool = False
    failures: list[tuple[int, NormalizedError]] = field(default_factory=list)


class FailoverController:
    """
    Orchestrates selection, attempts, and output validation for a request.

    Args:
        pool: Shared credential pool.
        policy: Attempt ordering policy over the pool.
        executor: Single-attempt executor bound to the pool.
        validator: Output policy check.
        instructions: System instruction blocks prepended to every context.
        client: Upstream adapter to close on shutdown, if owned.

    Example:
        >>> outcome = await controller.generate_reply("Who is the owner?")
        >>> outcome.text
        'The owner is a backend engineer...'
    """

    def __init__(
        self,
        pool: CredentialPool,
        policy: SelectionPolicy,
        executor: RequestExecutor,
        validator: OutputValidator,
        instructions: Sequence[str] = (),
        client: Optional[ChatCompletionClient] = None,
    ) -> None:
        self._pool = pool
        self._policy = policy
        self._executor = executor
        self._validator = validator
        self._instructions = tuple(instructions)
        self._client = client

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: Optional[ChatCompletionClient] = None,
    ) -> "FailoverController":
        """
        Wire pool, policy, executor and validator from settings.

        Args:
            settings: Application settings.
            client: Upstream adapter; chosen from settings.provider if omitted.

        Returns:
            A controller owning a fresh credential pool.

        Raises:
            ConfigurationError: If no credentials are configured.
        """
        pool = CredentialPool(settings.credentials(), cooldown_seconds=settings.cooldown_seconds)

        if client is None:
            if settings.provider == "fake":
                client = FakeChatClient()
            else:
                client = GitHubModelsClient(
                    base_url=settings.endpoint,
                    timeout_seconds=settings.upstream_timeout_seconds,
                )

        executor = RequestExecutor(
            pool,
            client,
            model=settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )
        validator = (
            EnglishOnlyValidator() if settings.output_policy == "english_only" else AllowAllValidator()
        )
        return cls(
            pool=pool,
            policy=SelectionPolicy(pool),
            executor=executor,
            validator=validator,
            instructions=(settings.system_prompt, LANGUAGE_POLICY),
            client=client,
        )

    @property
    def pool(self) -> CredentialPool:
        """Credential pool shared by every request."""
        return self._pool

    async def aclose(self) -> None:
        """Release the upstream adapter's connections."""
        if self._client is not None:
            await self._client.aclose()

    def build_context(
        self, message: str, history: Optional[list[ConversationTurn]] = None
    ) -> ConversationContext:
        """Assemble the upstream conversation for one request."""
        return ConversationContext.build(message, history, self._instructions)

    async def generate_reply(
        self, message: str, history: Optional[list[ConversationTurn]] = None
    ) -> FailoverOutcome:
        """
        Produce a reply for message given prior turns.

        Raises:
            ExhaustionError: If every credential failed.
        """
        return await self.run(self.build_context(message, history))

    async def run(self, context: ConversationContext) -> FailoverOutcome:
        """
        Drive the state machine to a terminal state.

        Raises:
            ExhaustionError: On DONE_EXHAUSTED.
        """
        run = _Run(context=context)
        try:
            while True:
                if run.state is FailoverState.SELECTING:
                    self._select(run)
                elif run.state is FailoverState.ATTEMPTING:
                    await self._attempt(run)
                elif run.state is FailoverState.VALIDATING:
                    await self._validate(run)
                elif run.state is FailoverState.DONE_SUCCESS:
                    return FailoverOutcome(
                        text=run.text,
                        credential_index=run.index,
                        attempts=run.position,
                        regenerated=run.regenerated,
                    )
                else:
                    raise self._exhausted(run)
        finally:
            metrics.set_cooling_down(self._pool.cooling_down_count())

    # =========================================================================
    # State Handlers
    # =========================================================================

    def _select(self, run: _Run) -> None:
        run.order = tuple(self._policy.select_order(self._pool.now()))
        logger.debug("attempt order selected", order=list(run.order))
        run.state = FailoverState.ATTEMPTING

    async def _attempt(self, run: _Run) -> None:
        run.index = run.order[run.position]
        run.position += 1

        result = await self._executor.execute(run.index, run.context)
        if isinstance(result, AttemptSuccess):
            run.text = result.text
            run.state = FailoverState.VALIDATING
            return

        run.failures.append((run.index, result.error))
        if run.position < len(run.order):
            logger.info(
                "failing over to next credential",
                failed_index=run.index,
                next_index=run.order[run.position],
            )
        else:
            run.state = FailoverState.DONE_EXHAUSTED

    async def _validate(self, run: _Run) -> None:
        if not self._validator.validate(run.text):
            metrics.record_regeneration()
            logger.info("output policy violated, regenerating", credential_index=run.index)

            retry = await self._executor.execute(run.index, run.context)
            run.regenerated = True
            if isinstance(retry, AttemptSuccess):
                run.text = retry.text
            else:
                logger.warning(
                    "regeneration failed, keeping original reply",
                    credential_index=run.index,
                    code=retry.error.code,
                )
        run.state = FailoverState.DONE_SUCCESS

    def _exhausted(self, run: _Run) -> ExhaustionError:
        metrics.record_exhaustion()
        for index, error in run.failures:
            logger.error(
                "credential failed during exhausted request",
                credential_index=index,
                code=error.code,
                error=error.message,
            )
        logger.error("all credentials failed", attempts=len(run.failures))
        return ExhaustionError(attempts=list(run.failures))
