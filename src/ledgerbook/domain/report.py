"""Statement generation domain service."""

import logging
from datetime import date
from typing import Optional

from ledgerbook.domain.balances import sorted_posted
from ledgerbook.domain.entities import ZERO, ReportRow, Statement
from ledgerbook.domain.errors import NotFoundError, account_not_found
from ledgerbook.domain.ledger import LedgerStore

logger = logging.getLogger(__name__)


class StatementService:
    """Service for building account statements from posted vouchers."""

    def __init__(self, store: LedgerStore):
        """Initialize statement service.

        Args:
            store: Ledger store to read from
        """
        self.store = store

    def generate(
        self,
        account_id: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Statement:
        """Replay posted vouchers to build a statement.

        With an account, the statement starts from that account's balance on
        the day before ``from_date`` and carries a running balance per row.
        Without one, every line in the window is listed, the opening balance
        is zero, and the closing figure is the net of debits and credits.

        Args:
            account_id: Optional account to restrict the statement to
            from_date: Optional inclusive start date
            to_date: Optional inclusive end date

        Returns:
            Statement with rows in (date, voucher number) order

        Raises:
            NotFoundError: If account_id does not match an account
        """
        account = None
        if account_id is not None:
            account = self.store.get_account(account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))

        posted = sorted_posted(self.store.transactions)

        opening_balance = ZERO
        if account is not None:
            opening_balance = account.opening_balance
            if from_date is not None:
                for tx in posted:
                    if tx.date >= from_date:
                        continue
                    for line in tx.lines:
                        if line.account_id == account.id:
                            opening_balance += line.dr - line.cr

        running = opening_balance
        total_dr = ZERO
        total_cr = ZERO
        rows = []

        for tx in posted:
            if from_date is not None and tx.date < from_date:
                continue
            if to_date is not None and tx.date > to_date:
                continue

            for line in tx.lines:
                if account is not None and line.account_id != account.id:
                    continue

                if account is not None:
                    running += line.dr - line.cr
                total_dr += line.dr
                total_cr += line.cr

                rows.append(
                    ReportRow(
                        voucher_no=tx.voucher_no,
                        date=tx.date,
                        narration=line.narration or tx.narration,
                        account_id=line.account_id,
                        dr=line.dr,
                        cr=line.cr,
                        balance=running if account is not None else ZERO,
                    )
                )

        closing_balance = running if account is not None else total_dr - total_cr
        logger.debug(
            "Statement for %s from %s to %s: %d rows",
            account_id or "all accounts",
            from_date,
            to_date,
            len(rows),
        )

        return Statement(
            account_id=account_id,
            from_date=from_date,
            to_date=to_date,
            rows=tuple(rows),
            opening_balance=opening_balance,
            total_dr=total_dr,
            total_cr=total_cr,
            closing_balance=closing_balance,
        )
