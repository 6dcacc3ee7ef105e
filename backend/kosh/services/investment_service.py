"""
Investment Service

Moves treasury money into the mock high/low risk funds and back, and lets
the demo move fund NAVs. Positions are valued at the current NAV of their
risk level.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.exceptions import InsufficientFundsException, ValidationException
from kosh.core.logging import get_logger
from kosh.core.money import ZERO, format_inr, positive_amount, quantize_money, to_decimal
from kosh.core.settings import settings
from kosh.models.investment import InvestmentNav, InvestmentPosition, RiskLevel
from kosh.models.treasury import EntryKind, TreasuryEntry
from kosh.services.treasury_service import TreasuryService

logger = get_logger(__name__)

HUNDRED = Decimal("100")


@dataclass
class ValuedPosition:
    """A position together with the NAV it is currently valued at."""
    position: InvestmentPosition
    nav: Decimal

    @property
    def current_value(self) -> Decimal:
        return quantize_money(Decimal(self.position.units) * self.nav)


class InvestmentService:
    """Service for fund positions and NAVs."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.treasury = TreasuryService(db)

    async def _nav_row(self, risk: RiskLevel) -> Optional[InvestmentNav]:
        result = await self.db.execute(
            select(InvestmentNav).where(InvestmentNav.risk == risk)
        )
        return result.scalar_one_or_none()

    async def current_nav(self, risk: RiskLevel) -> Decimal:
        row = await self._nav_row(risk)
        return quantize_money(row.current_nav) if row else settings.demo.SEED_NAV

    async def nav_map(self) -> dict:
        navs = await self.list_navs()
        return {nav.risk: quantize_money(nav.current_nav) for nav in navs}

    async def list_navs(self) -> List[InvestmentNav]:
        result = await self.db.execute(select(InvestmentNav).order_by(InvestmentNav.risk))
        return list(result.scalars().all())

    async def invested_amount(self, user_id: int) -> Decimal:
        result = await self.db.execute(
            select(func.coalesce(func.sum(InvestmentPosition.amount), 0))
            .where(InvestmentPosition.user_id == user_id)
        )
        return quantize_money(Decimal(str(result.scalar_one())))

    async def _positions(self, user_id: int) -> List[InvestmentPosition]:
        result = await self.db.execute(
            select(InvestmentPosition)
            .where(InvestmentPosition.user_id == user_id)
            .order_by(InvestmentPosition.created_at.desc(), InvestmentPosition.id.desc())
        )
        return list(result.scalars().all())

    async def _balances(self, user_id: int) -> Tuple[Decimal, Decimal]:
        return await self.invested_amount(user_id), await self.treasury.get_balance(user_id)

    async def invest(
        self,
        user_id: int,
        raw_amount: Any,
        risk: RiskLevel = RiskLevel.LOW,
    ) -> Tuple[Decimal, Decimal]:
        """
        Buy fund units with treasury money.

        The position, the ledger entry and the treasury decrement are
        committed together.

        Args:
            user_id: Investing user
            raw_amount: Amount to move out of the treasury
            risk: Fund to buy

        Returns:
            Tuple of (total invested amount, treasury balance)

        Raises:
            ValidationException: If the amount is not a positive number
            InsufficientFundsException: If the treasury cannot cover the amount
        """
        amount = positive_amount(raw_amount)
        if amount is None:
            raise ValidationException("amount must be a positive number")

        nav = await self.current_nav(risk)
        units = quantize_money(amount / nav)
        entry = TreasuryEntry(
            user_id=user_id,
            kind=EntryKind.INVEST,
            amount=amount,
            description=f"Invested ₹{format_inr(amount)} to {risk.label}",
            risk=risk,
            units=units,
            nav_at_invest=nav,
        )
        await self.treasury.withdraw(user_id, amount, entry)
        self.db.add(
            InvestmentPosition(
                user_id=user_id,
                risk=risk,
                units=units,
                amount=amount,
                nav_at_invest=nav,
            )
        )
        await self.db.commit()

        logger.info(
            "Investment created",
            extra={
                "user_id": user_id,
                "risk": risk.value,
                "amount": str(amount),
                "units": str(units),
                "nav": str(nav),
            }
        )
        return await self._balances(user_id)

    async def get_positions(self, user_id: int) -> List[ValuedPosition]:
        """All positions of a user, newest first, valued at current NAVs."""
        navs = await self.nav_map()
        return [
            ValuedPosition(position, navs.get(position.risk, settings.demo.SEED_NAV))
            for position in await self._positions(user_id)
        ]

    async def liquidate(self, user_id: int, raw_amount: Any) -> Tuple[Decimal, Decimal]:
        """
        Return invested money to the treasury.

        Positions are consumed most recent first. A position fully covered
        by the remaining amount is deleted; the last one touched shrinks and
        its units scale with its amount. Nothing changes when the amount
        exceeds the total invested.

        Returns:
            Tuple of (total invested amount, treasury balance)

        Raises:
            ValidationException: If the amount is not a positive number
            InsufficientFundsException: If the amount exceeds the invested total
        """
        amount = positive_amount(raw_amount)
        if amount is None:
            raise ValidationException("amount must be a positive number")

        positions = await self._positions(user_id)
        invested = sum((Decimal(p.amount) for p in positions), ZERO)
        if amount > invested:
            raise InsufficientFundsException(
                "Insufficient invested amount",
                extra={"invested": float(invested), "requested": float(amount)}
            )

        remaining = amount
        for position in positions:
            if remaining <= ZERO:
                break
            position_amount = Decimal(position.amount)
            if position_amount <= remaining:
                await self.db.delete(position)
                remaining -= position_amount
            else:
                new_amount = position_amount - remaining
                position.units = quantize_money(Decimal(position.units) * new_amount / position_amount)
                position.amount = new_amount
                remaining = ZERO

        await self.treasury.deposit(
            user_id,
            amount,
            EntryKind.LIQUIDATE,
            f"Liquidated ₹{format_inr(amount)} from investments",
        )
        await self.db.commit()

        logger.info(
            "Investments liquidated",
            extra={"user_id": user_id, "amount": str(amount)}
        )
        return await self._balances(user_id)

    async def grow(self, raw_rate: Any, risk: RiskLevel = RiskLevel.LOW) -> List[InvestmentNav]:
        """
        Move the NAV of a fund by a percentage.

        Returns:
            List[InvestmentNav]: All NAV rows after the change

        Raises:
            ValidationException: If the rate is not a number above -100
        """
        rate = to_decimal(raw_rate)
        if rate is None:
            raise ValidationException("ratePct must be a number")
        if rate <= -HUNDRED:
            raise ValidationException("ratePct must be greater than -100")

        row = await self._nav_row(risk)
        current = Decimal(row.current_nav) if row else settings.demo.SEED_NAV
        next_nav = quantize_money(current * (1 + rate / HUNDRED))
        if next_nav <= ZERO:
            raise ValidationException("ratePct would reduce the NAV to zero")

        if row is None:
            self.db.add(InvestmentNav(risk=risk, current_nav=next_nav))
        else:
            row.current_nav = next_nav
        await self.db.commit()

        logger.info(
            "NAV moved",
            extra={"risk": risk.value, "rate_pct": str(rate), "nav": str(next_nav)}
        )
        return await self.list_navs()
