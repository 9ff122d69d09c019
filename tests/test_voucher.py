"""Tests for voucher commands."""

from datetime import date
from decimal import Decimal

from ledgerbook.cli.main import cli
from ledgerbook.database.factories import create_sqlite_storage
from ledgerbook.domain.ledger import LedgerStore


def reload(temp_storage):
    return LedgerStore(create_sqlite_storage(temp_storage.database_path))


def invoke(cli_runner, temp_storage, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_storage.database_path, *args], **kwargs)


def test_add_and_post_voucher(cli_runner, temp_storage, cash_account, sales_account):
    result = invoke(
        cli_runner, temp_storage,
        "voucher", "add", "--date", "2024-01-05", "--narration", "Cash sale",
        "--dr", "Cash", "500", "--cr", "Sales", "500", "--post",
    )

    assert result.exit_code == 0
    assert "Posted voucher #1" in result.output

    store = reload(temp_storage)
    tx = store.transactions[0]
    assert tx.posted is True
    assert tx.date == date(2024, 1, 5)
    assert [(line.dr, line.cr) for line in tx.lines] == [(Decimal("500"), Decimal("0")), (Decimal("0"), Decimal("500"))]
    assert store.meta.next_voucher_no == 2


def test_add_draft_then_post(cli_runner, temp_storage, cash_account, sales_account):
    result = invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "1", "20", "--cr", "2", "20")
    assert result.exit_code == 0
    assert "Saved draft voucher #1" in result.output
    assert reload(temp_storage).transactions[0].posted is False

    result = invoke(cli_runner, temp_storage, "voucher", "post", "1")
    assert result.exit_code == 0
    assert "Posted voucher #1" in result.output
    assert reload(temp_storage).transactions[0].posted is True

    result = invoke(cli_runner, temp_storage, "voucher", "post", "1")
    assert "already posted" in result.output


def test_unbalanced_post_is_refused(cli_runner, temp_storage, cash_account, sales_account):
    result = invoke(
        cli_runner, temp_storage,
        "voucher", "add", "--dr", "Cash", "100", "--dr", "Cash", "50", "--cr", "Sales", "140", "--post",
    )

    assert result.exit_code == 1
    assert "Totals do not match" in result.output
    assert "Difference: 10.00" in result.output

    store = reload(temp_storage)
    assert store.transactions == []
    assert store.load_draft().total_dr == Decimal("150")


def test_draft_review_save_and_discard(cli_runner, temp_storage, cash_account, sales_account):
    invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "10", "--cr", "Sales", "9", "--post")

    result = invoke(cli_runner, temp_storage, "voucher", "draft")
    assert "Voucher #1" in result.output
    assert "[Draft]" in result.output

    result = invoke(cli_runner, temp_storage, "voucher", "draft", "--save")
    assert "Saved draft voucher #1" in result.output
    store = reload(temp_storage)
    assert store.transactions[0].posted is False
    assert store.load_draft() is None

    result = invoke(cli_runner, temp_storage, "voucher", "draft", "--discard")
    assert "No in-progress voucher" in result.output


def test_add_requires_two_lines(cli_runner, temp_storage, cash_account):
    result = invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "10")

    assert result.exit_code == 1
    assert "Minimum 2 lines" in result.output


def test_add_without_accounts(cli_runner, temp_storage):
    result = invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "10", "--cr", "Sales", "10")

    assert result.exit_code == 1
    assert "create an account first" in result.output


def test_add_rejects_negative_amount(cli_runner, temp_storage, cash_account, sales_account):
    result = invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "-10", "--cr", "Sales", "10")

    assert result.exit_code == 1
    assert "must not be negative" in result.output


def test_add_unknown_account(cli_runner, temp_storage, cash_account):
    result = invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "10", "--cr", "Nowhere", "10")

    assert result.exit_code == 1
    assert "Account 'Nowhere' not found" in result.output


def test_delete_tail_voucher_reuses_number(cli_runner, temp_storage, store, cash_account, sales_account, make_voucher):
    lines = [(cash_account.id, 1, 0), (sales_account.id, 0, 1)]
    for n in range(1, 7):
        store.save_transaction(make_voucher(n, "2024-01-05", lines))

    result = invoke(cli_runner, temp_storage, "voucher", "delete", "6", "--yes")
    assert result.exit_code == 0
    assert "Deleted voucher #6" in result.output

    result = invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "1", "--cr", "Sales", "1", "--post")
    assert "Posted voucher #6" in result.output


def test_delete_unknown_voucher(cli_runner, temp_storage):
    result = invoke(cli_runner, temp_storage, "voucher", "delete", "3", "--yes")

    assert result.exit_code == 1
    assert "Voucher #3 not found" in result.output


def test_list_and_show(cli_runner, temp_storage, store, cash_account, sales_account, make_voucher):
    store.save_transaction(make_voucher(1, "2024-01-05", [(cash_account.id, 5, 0), (sales_account.id, 0, 5)], narration="First"))
    store.save_transaction(
        make_voucher(2, "2024-01-06", [(cash_account.id, 7, 0), ("acc_gone", 0, 7)], narration="Second", posted=False)
    )

    result = invoke(cli_runner, temp_storage, "voucher", "list")
    assert result.exit_code == 0
    assert result.output.index("Second") < result.output.index("First")

    result = invoke(cli_runner, temp_storage, "voucher", "list", "--status", "posted")
    assert "First" in result.output
    assert "Second" not in result.output

    result = invoke(cli_runner, temp_storage, "voucher", "list", "--search", "nothing-like-this")
    assert "No vouchers match" in result.output

    result = invoke(cli_runner, temp_storage, "voucher", "show", "2")
    assert result.exit_code == 0
    assert "Unknown" in result.output
    assert "Cash (cash)" in result.output


def test_add_refused_while_voucher_in_progress(cli_runner, temp_storage, cash_account, sales_account):
    invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "10", "--cr", "Sales", "9", "--post")

    result = invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "10", "--cr", "Sales", "10", "--post")
    assert result.exit_code == 1
    assert "Voucher #1 is still in progress" in result.output
    assert reload(temp_storage).transactions == []

    invoke(cli_runner, temp_storage, "voucher", "draft", "--discard")
    result = invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "10", "--cr", "Sales", "10", "--post")
    assert "Posted voucher #1" in result.output


def test_draft_save_takes_next_number_when_taken(cli_runner, temp_storage, store, cash_account, sales_account, make_voucher):
    invoke(cli_runner, temp_storage, "voucher", "add", "--dr", "Cash", "10", "--cr", "Sales", "9", "--post")
    store.save_transaction(make_voucher(1, "2024-01-05", [(cash_account.id, 3, 0), (sales_account.id, 0, 3)]))

    result = invoke(cli_runner, temp_storage, "voucher", "draft", "--save")

    assert "Saved draft voucher #2" in result.output
    assert sorted(tx.voucher_no for tx in reload(temp_storage).transactions) == [1, 2]


def test_add_with_line_narrations(cli_runner, temp_storage, cash_account, sales_account):
    result = invoke(
        cli_runner, temp_storage,
        "voucher", "add", "--narration", "Sale", "--dr", "Cash", "5", "--cr", "Sales", "5",
        "--line-narration", "Till", "--post",
    )

    assert result.exit_code == 0
    lines = reload(temp_storage).transactions[0].lines
    assert [line.narration for line in lines] == ["Till", ""]


def test_add_rejects_extra_line_narrations(cli_runner, temp_storage, cash_account, sales_account):
    result = invoke(
        cli_runner, temp_storage,
        "voucher", "add", "--dr", "Cash", "5", "--cr", "Sales", "5",
        "--line-narration", "a", "--line-narration", "b", "--line-narration", "c",
    )

    assert result.exit_code == 1
    assert "3 line narrations given for 2 lines" in result.output


class TestEditVoucher:
    """Tests for voucher edit."""

    def test_edit_date_and_narration(self, cli_runner, temp_storage, store, cash_account, sales_account, make_voucher):
        store.save_transaction(make_voucher(1, "2024-01-05", [(cash_account.id, 5, 0), (sales_account.id, 0, 5)]))

        result = invoke(cli_runner, temp_storage, "voucher", "edit", "1", "--date", "2024-01-09", "--narration", "Fixed")

        assert result.exit_code == 0
        assert "Updated voucher #1" in result.output
        tx = reload(temp_storage).transactions[0]
        assert tx.id == "tx1"
        assert (tx.date, tx.narration, tx.posted) == (date(2024, 1, 9), "Fixed", True)

    def test_edit_lines_of_posted_voucher(self, cli_runner, temp_storage, store, cash_account, sales_account, make_voucher):
        store.save_transaction(make_voucher(1, "2024-01-05", [(cash_account.id, 5, 0), (sales_account.id, 0, 5)]))

        result = invoke(
            cli_runner, temp_storage,
            "voucher", "edit", "1", "--dr", "Cash", "450", "--cr", "Sales", "450",
            "--line-narration", "Till", "--line-narration", "Counter sale",
        )

        assert result.exit_code == 0
        tx = reload(temp_storage).find_voucher(1)
        assert tx.posted is True
        assert tx.total_dr == Decimal("450")
        assert [line.narration for line in tx.lines] == ["Till", "Counter sale"]

        result = invoke(cli_runner, temp_storage, "report", "statement", "--account", "Sales")
        assert "Counter sale" in result.output

    def test_unbalanced_edit_of_posted_voucher_is_refused(
        self, cli_runner, temp_storage, store, cash_account, sales_account, make_voucher
    ):
        store.save_transaction(make_voucher(1, "2024-01-05", [(cash_account.id, 5, 0), (sales_account.id, 0, 5)]))

        result = invoke(cli_runner, temp_storage, "voucher", "edit", "1", "--dr", "Cash", "50", "--cr", "Sales", "5")

        assert result.exit_code == 1
        assert "Difference: 45.00" in result.output
        reloaded = reload(temp_storage)
        assert reloaded.find_voucher(1).total_dr == Decimal("5")
        assert reloaded.load_draft().id == "tx1"

    def test_edit_draft_voucher_stays_draft(self, cli_runner, temp_storage, store, cash_account, sales_account, make_voucher):
        store.save_transaction(
            make_voucher(1, "2024-01-05", [(cash_account.id, 5, 0), (sales_account.id, 0, 4)], posted=False)
        )

        result = invoke(cli_runner, temp_storage, "voucher", "edit", "1", "--line-narration", "Deposit")

        assert result.exit_code == 0
        tx = reload(temp_storage).find_voucher(1)
        assert tx.posted is False
        assert tx.lines[0].narration == "Deposit"

    def test_edit_without_changes(self, cli_runner, temp_storage, store, cash_account, sales_account, make_voucher):
        store.save_transaction(make_voucher(1, "2024-01-05", [(cash_account.id, 5, 0), (sales_account.id, 0, 5)]))

        result = invoke(cli_runner, temp_storage, "voucher", "edit", "1")

        assert result.exit_code == 0
        assert "Nothing to update." in result.output

    def test_edit_unknown_voucher(self, cli_runner, temp_storage):
        result = invoke(cli_runner, temp_storage, "voucher", "edit", "9", "--narration", "x")

        assert result.exit_code == 1
        assert "Voucher #9 not found" in result.output
