"""
AI Script Tools.

Credit-gated script generation, enhancement and analysis. Each call
checks the balance, charges the member, then calls the language model.
If the model call fails the charge is refunded and the error surfaces
as a 502.
"""

from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import ExternalServiceError, ValidationError
from modules.backend.integrations.openai_client import get_openai_client
from modules.backend.models.enums import NotificationType
from modules.backend.models.user import User
from modules.backend.schemas.ai import (
    AiResult,
    AnalyzeScriptRequest,
    EnhanceScriptRequest,
    GenerateScriptRequest,
)
from modules.backend.services.base import BaseService
from modules.backend.services.credits import CreditService
from modules.backend.services.notification import NotificationService

SCREENWRITER_PROMPT = (
    "You are an experienced screenwriter working with military veterans and their "
    "families. Write in standard screenplay format with scene headings, action lines "
    "and dialogue. Treat military service with authenticity and respect."
)

SCRIPT_DOCTOR_PROMPT = (
    "You are a script doctor. Improve the screenplay you are given according to the "
    "requested enhancement while keeping the writer's voice and story intact. Return "
    "the full revised script in screenplay format."
)

ANALYST_PROMPT = (
    "You are a festival programmer and script analyst. Assess the screenplay for "
    "structure, character, dialogue, pacing and marketability. Finish with a festival "
    "readiness score out of 100 and three concrete revision notes."
)


def require_ai_tools() -> None:
    if not get_app_config().features.ai_tools_enabled:
        raise ValidationError("AI tools are currently disabled")


class AiService(BaseService):
    def __init__(self, session: AsyncSession, correlation_id: str = "internal") -> None:
        super().__init__(session)
        self.credits = CreditService(session, correlation_id=correlation_id)
        self.notifications = NotificationService(session)

    async def _run(
        self,
        user: User,
        operation: str,
        cost: int,
        title: str,
        call: Callable[[], Awaitable[str]],
    ) -> AiResult:
        require_ai_tools()
        self.credits.ensure_can_spend(user, cost)
        remaining = await self.credits.deduct(user, cost, f"AI {operation.replace('_', ' ')}")

        try:
            content = await call()
        except ExternalServiceError:
            self._logger.error(
                "AI provider failed, refunding credits",
                extra={"user_id": user.id, "operation": operation, "cost": cost},
            )
            await self.credits.refund(user, cost, f"Refund for failed AI {operation.replace('_', ' ')}")
            # The request transaction rolls back on the error below; keep the ledger entries
            await self.session.commit()
            raise

        await self.notifications.notify(
            user.id,
            NotificationType.AI_TASK_COMPLETE,
            title,
            f"Your {operation.replace('_', ' ')} request is ready.",
            metadata={"operation": operation, "credits_used": cost},
        )
        self._log_operation("AI task complete", user_id=user.id, ai_operation=operation, cost=cost)
        return AiResult(content=content, credits_used=cost, remaining_credits=remaining)

    async def generate_script(self, user: User, data: GenerateScriptRequest) -> AiResult:
        details = [f"Premise: {data.prompt}"]
        if data.genre:
            details.append(f"Genre: {data.genre}")
        if data.tone:
            details.append(f"Tone: {data.tone}")
        if data.length:
            details.append(f"Length: {data.length}")
        prompt = "Write an original screenplay.\n" + "\n".join(details)

        return await self._run(
            user,
            "generate_script",
            get_app_config().credits.ai_costs.generate_script,
            "Script generated",
            lambda: get_openai_client().complete(SCREENWRITER_PROMPT, prompt, max_tokens=3000),
        )

    async def enhance_script(self, user: User, data: EnhanceScriptRequest) -> AiResult:
        prompt = f"Enhancement requested: {data.enhancement}\n\nScript:\n{data.script_content}"
        return await self._run(
            user,
            "enhance_script",
            get_app_config().credits.ai_costs.enhance_script,
            "Script enhanced",
            lambda: get_openai_client().complete(SCRIPT_DOCTOR_PROMPT, prompt, max_tokens=3000),
        )

    async def analyze_script(self, user: User, data: AnalyzeScriptRequest) -> AiResult:
        return await self._run(
            user,
            "analyze_script",
            get_app_config().credits.ai_costs.analyze_script,
            "Script analysis ready",
            lambda: get_openai_client().complete(ANALYST_PROMPT, data.script_content, max_tokens=1500),
        )
