"""
Gamification state for Adducation

Owns a user's progress record and the rules that change it:
- XP awards and the derived level
- Daily streaks
- One-time achievements

Every mutation is applied in memory first, written to local storage, and then
pushed to the backend in a background task. Remote sync is best effort and
last-write-wins: failures are logged and never reach the caller.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from pydantic import ValidationError

from adducation.core.backend_client import BackendClient
from adducation.models.progress import (
    DEFAULT_ACHIEVEMENTS,
    Achievement,
    ProgressSyncResult,
    UserProgress,
    level_for_xp,
    utcnow,
)
from adducation.storage.local_store import PROGRESS_KEY, LocalStore

logger = logging.getLogger(__name__)


# Milestones
LEVEL_MILESTONE = 5
STREAK_MILESTONE = 7

# Fixed XP awards
QUESTION_GENERATED_XP = 5
LEARNING_CONTENT_XP = 15
INTERVIEW_MIN_XP = 25


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_between(earlier: datetime, later: datetime) -> int:
    """Calendar-day difference (UTC) between two instants."""
    return (_as_utc(later).date() - _as_utc(earlier).date()).days


class GamificationState:
    """
    Application-level gamification state for the signed-in user.

    All operations are no-ops while no progress is loaded.
    """

    def __init__(
        self,
        backend: BackendClient,
        store: LocalStore,
        achievements: list[Achievement] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize gamification state.

        Args:
            backend: Backend client used for remote progress sync
            store: Local durable storage
            achievements: Achievement catalog (defaults to the built-in one)
            clock: Source of "now", injectable for tests
        """
        self.backend = backend
        self.store = store
        self.achievements = list(achievements or DEFAULT_ACHIEVEMENTS)
        self.clock = clock

        self.user_progress: UserProgress | None = self._restore()
        self.is_loading = False

        # Outstanding background syncs
        self._sync_tasks: set[asyncio.Task] = set()

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _restore(self) -> UserProgress | None:
        cached = self.store.get_json(PROGRESS_KEY)
        if not isinstance(cached, dict):
            return None
        try:
            return UserProgress.model_validate(cached)
        except ValidationError as e:
            logger.warning(f"Discarding cached progress: {e.error_count()} error(s)")
            return None

    def _commit(self, progress: UserProgress, reason: str):
        """Replace the snapshot, persist it locally, and schedule a remote sync."""
        self.user_progress = progress
        self.store.set_json(PROGRESS_KEY, progress.to_payload())
        self._schedule_sync(progress, reason)

    def _schedule_sync(self, progress: UserProgress, reason: str):
        task = asyncio.create_task(
            self._sync(progress.user_id, progress.to_payload(), reason)
        )
        self._sync_tasks.add(task)
        task.add_done_callback(self._sync_tasks.discard)

    async def _sync(self, user_id: str, payload: dict, reason: str):
        try:
            result = await self.backend.update_user_progress(user_id, payload)
        except Exception as e:
            logger.error(f"Failed to sync progress with backend ({reason}): {e}")
            return

        if isinstance(result, ProgressSyncResult):
            logger.warning(f"Progress sync incomplete ({reason}): {result.message}")

    async def drain(self):
        """Wait for all scheduled syncs to finish."""
        while self._sync_tasks:
            await asyncio.gather(*list(self._sync_tasks), return_exceptions=True)

    def reset(self):
        """Forget the loaded progress, in memory and in local storage."""
        if self.user_progress is not None:
            logger.info(f"Clearing progress for {self.user_progress.user_id}")
        self.user_progress = None
        self.store.remove_item(PROGRESS_KEY)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_achievement(self, achievement_id: str) -> Achievement | None:
        return next((a for a in self.achievements if a.id == achievement_id), None)

    def is_unlocked(self, achievement_id: str) -> bool:
        return bool(self.user_progress and achievement_id in self.user_progress.achievements)

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def _check_milestones(self):
        if self.user_progress is None:
            return
        if self.user_progress.current_level >= LEVEL_MILESTONE:
            await self.unlock_achievement("level_5")
        if self.user_progress.current_streak >= STREAK_MILESTONE:
            await self.unlock_achievement("streak_7")

    async def add_xp(self, amount: int, reason: str) -> UserProgress | None:
        """
        Award XP and recompute the level.

        Args:
            amount: XP to add
            reason: Human-readable reason, used in logs

        Returns:
            The updated progress, or None when nothing is loaded
        """
        progress = self.user_progress
        if progress is None:
            return None

        total_xp = max(progress.total_xp + amount, 0)
        updated = progress.model_copy(update={
            "total_xp": total_xp,
            "current_level": level_for_xp(total_xp),
            "last_activity_date": self.clock(),
        })
        logger.info(f"+{amount} XP for {progress.user_id}: {reason} (total {total_xp})")
        self._commit(updated, f"xp: {reason}")

        await self._check_milestones()
        return self.user_progress

    async def update_streak(self) -> UserProgress | None:
        """
        Register today's activity.

        A gap of exactly one day extends the streak, a longer gap restarts it
        at 1, and same-day activity leaves it unchanged.
        """
        progress = self.user_progress
        if progress is None:
            return None

        now = self.clock()
        days_diff = days_between(progress.last_activity_date, now)

        streak = progress.current_streak
        if days_diff == 1:
            streak += 1
        elif days_diff > 1:
            streak = 1

        updated = progress.model_copy(update={
            "current_streak": streak,
            "longest_streak": max(streak, progress.longest_streak),
            "last_activity_date": now,
        })
        logger.info(f"Streak for {progress.user_id}: {streak} (gap {days_diff} day(s))")
        self._commit(updated, "streak")

        await self._check_milestones()
        return self.user_progress

    async def unlock_achievement(self, achievement_id: str) -> bool:
        """
        Unlock an achievement once and grant its XP reward.

        Returns:
            True if the achievement was newly unlocked
        """
        progress = self.user_progress
        if progress is None or achievement_id in progress.achievements:
            return False

        achievement = self.get_achievement(achievement_id)
        if achievement is None:
            logger.warning(f"Unknown achievement: {achievement_id}")
            return False

        total_xp = progress.total_xp + achievement.xp_reward
        updated = progress.model_copy(update={
            "achievements": [*progress.achievements, achievement_id],
            "total_xp": total_xp,
            "current_level": level_for_xp(total_xp),
        })
        logger.info(f"Achievement unlocked for {progress.user_id}: {achievement.title}")
        self._commit(updated, f"achievement: {achievement_id}")

        await self._check_milestones()
        return True

    async def load_user_progress(self, user_id: str) -> UserProgress | None:
        """
        Load progress for a user.

        Order: backend record, then this user's locally cached record, then a
        zero-valued default. A record that did not come from the backend is
        written back to it.
        """
        self.is_loading = True
        try:
            progress = None
            remote = await self.backend.get_user_progress(user_id)
            if remote:
                try:
                    progress = UserProgress.model_validate({"userId": user_id, **remote})
                except ValidationError as e:
                    logger.warning(f"Backend progress for {user_id} is malformed: {e.error_count()} error(s)")

            if progress is not None:
                self.user_progress = progress
                self.store.set_json(PROGRESS_KEY, progress.to_payload())
                logger.info(f"Loaded progress for {user_id} from backend")
                return progress

            cached = self.user_progress
            if cached is not None and cached.user_id == user_id:
                logger.info(f"Backend has no progress for {user_id}, pushing local copy")
                self._commit(cached, "initial")
                return cached

            logger.info(f"Initializing default progress for {user_id}")
            self._commit(UserProgress.default_for(user_id), "initial")
            return self.user_progress
        except Exception as e:
            logger.error(f"Failed to load user progress: {e}")
            self.user_progress = None
            return None
        finally:
            self.is_loading = False

    # =========================================================================
    # PRACTICE REWARDS
    # =========================================================================

    async def record_interview(self, score: float) -> int:
        """
        Record a scored practice interview.

        Awards max(score * 10, 25) XP and unlocks the first-interview
        achievement.

        Returns:
            XP awarded (0 when nothing is loaded)
        """
        progress = self.user_progress
        if progress is None:
            return 0

        count = progress.interviews_practiced + 1
        average = (progress.average_interview_score * progress.interviews_practiced + score) / count
        self._commit(
            progress.model_copy(update={
                "interviews_practiced": count,
                "average_interview_score": round(average, 2),
            }),
            "interview",
        )

        xp = max(int(score * 10), INTERVIEW_MIN_XP)
        await self.add_xp(xp, f"Interview practice (Score: {score}/10)")
        await self.unlock_achievement("first_interview")
        return xp

    async def complete_course(self, course_id: str, xp_reward: int, title: str = "") -> int:
        """
        Mark a course or lesson complete.

        A course already completed awards nothing.

        Returns:
            XP awarded
        """
        progress = self.user_progress
        if progress is None or course_id in progress.completed_courses:
            return 0

        self._commit(
            progress.model_copy(update={
                "completed_courses": [*progress.completed_courses, course_id],
            }),
            "course",
        )
        await self.add_xp(xp_reward, f"Completed lesson: {title or course_id}")
        await self.unlock_achievement("first_lesson")
        return xp_reward
