"""Supabase-backed ledger repository.

Writes go through the Postgres functions in `supabase/schema.sql`, so each
ledger operation commits in a single database transaction.
"""

from dataclasses import dataclass

from supabase import Client

from hydration_ledger.domain.models import GlobalStats, UserRecord
from hydration_ledger.services.ledger import LedgerRepository

_GLOBAL_STATS_ROW_ID = 1
_USER_COLUMNS = (
    "account, daily_goal, today_intake, total_intake, streak_days, "
    "last_update_date, is_registered, version"
)


@dataclass
class SupabaseLedgerRepository(LedgerRepository):
    """Supabase implementation for ledger persistence."""

    client: Client

    def get_user(self, account: str) -> UserRecord | None:
        """Return the record for an account, if present."""
        response = (
            self.client.table("hydration_users")
            .select(_USER_COLUMNS)
            .eq("account", account)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def create_user(self, record: UserRecord) -> bool:
        """Insert the account and bump the user counter in one transaction."""
        response = self.client.rpc(
            "ledger_register",
            {
                "p_account": record.account,
                "p_daily_goal": record.daily_goal,
                "p_last_update_date": record.last_update_date,
            },
        ).execute()
        return bool(response.data)

    def apply_intake(
        self, record: UserRecord, expected_version: int, day_key: int, amount: int
    ) -> bool:
        """Store the record and increment history and totals in one transaction."""
        response = self.client.rpc(
            "ledger_log_intake",
            {
                "p_account": record.account,
                "p_expected_version": expected_version,
                "p_today_intake": record.today_intake,
                "p_total_intake": record.total_intake,
                "p_streak_days": record.streak_days,
                "p_last_update_date": record.last_update_date,
                "p_day_key": day_key,
                "p_amount": amount,
            },
        ).execute()
        return bool(response.data)

    def update_goal(self, account: str, expected_version: int, daily_goal: int) -> bool:
        """Change the goal if the row is still at `expected_version`."""
        response = self.client.rpc(
            "ledger_update_goal",
            {
                "p_account": account,
                "p_expected_version": expected_version,
                "p_daily_goal": daily_goal,
            },
        ).execute()
        return bool(response.data)

    def get_daily_intake(self, account: str, day_key: int) -> int:
        """Return intake logged on a day, 0 if no row exists."""
        response = (
            self.client.table("daily_intake")
            .select("amount_ml")
            .eq("account", account)
            .eq("day_key", day_key)
            .limit(1)
            .execute()
        )
        if response.data:
            return int(response.data[0].get("amount_ml", 0))
        return 0

    def get_global_stats(self) -> GlobalStats:
        """Return the global counters row, zeros if missing."""
        response = (
            self.client.table("global_stats")
            .select("total_users, total_water_logged")
            .eq("id", _GLOBAL_STATS_ROW_ID)
            .limit(1)
            .execute()
        )
        if not response.data:
            return GlobalStats(total_users=0, total_water_logged=0)
        row = response.data[0]
        return GlobalStats(
            total_users=int(row.get("total_users", 0)),
            total_water_logged=int(row.get("total_water_logged", 0)),
        )


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        account=str(row["account"]),
        daily_goal=int(row["daily_goal"]),
        today_intake=int(row.get("today_intake", 0)),
        total_intake=int(row.get("total_intake", 0)),
        streak_days=int(row.get("streak_days", 0)),
        last_update_date=int(row["last_update_date"]),
        is_registered=bool(row.get("is_registered", True)),
        version=int(row.get("version", 0)),
    )
