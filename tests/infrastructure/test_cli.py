"""Tests for the click command-line interface against a temporary data directory."""

import pytest
from click.testing import CliRunner

from storefront.application.cancel_order import ADMIN_CANCEL_REMINDER
from storefront.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()
    env = {"STOREFRONT_DATA_DIR": str(tmp_path)}

    def invoke(*args):
        return runner.invoke(cli, list(args), env=env)

    return invoke


@pytest.fixture
def catalog(run):
    assert run("product", "add", "--name", "Widget", "--price", "15.00", "--stock", "5").exit_code == 0
    assert run("product", "add", "--name", "Gadget", "--price", "25.00", "--stock", "2").exit_code == 0
    return run


class TestProductCommands:

    def test_add_and_list(self, run):
        result = run("product", "add", "--name", "Widget", "--price", "15.00", "--stock", "5")
        assert result.exit_code == 0
        assert "Product #1 'Widget' added at $15.00 (5 in stock)" in result.output

        listed = run("product", "list")
        assert "Widget" in listed.output
        assert "$15.00" in listed.output

    def test_duplicate_rejected(self, catalog):
        result = catalog("product", "add", "--name", "Widget", "--price", "1")
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestOrderCommands:

    def test_place_reserves_stock(self, catalog):
        result = catalog("order", "place", "--user", "alice", "--items", "1:3,2:1")
        assert result.exit_code == 0
        assert "Order #1 placed  (status=active)" in result.output
        assert "$70.00" in result.output

        stock = catalog("inventory", "show").output.splitlines()
        widget = next(line for line in stock if line.startswith("Widget"))
        assert widget.split()[1] == "2"

    def test_pending_then_confirm(self, catalog):
        catalog("order", "place", "--user", "alice", "--items", "1:2", "--pending")
        result = catalog("order", "confirm", "--id", "1")
        assert result.exit_code == 0
        assert "Order #1 confirmed" in result.output
        assert "status=active" in catalog("order", "show", "--id", "1").output

    def test_insufficient_stock_reported(self, catalog):
        result = catalog("order", "place", "--user", "alice", "--items", "2:3")
        assert result.exit_code == 1
        assert "Insufficient stock for product: Gadget" in result.output

    def test_bad_item_format(self, catalog):
        result = catalog("order", "place", "--user", "alice", "--items", "Widget")
        assert result.exit_code == 2
        assert "Expected 'ProductId:Quantity'" in result.output

    def test_admin_cancel_prints_reminder(self, catalog):
        catalog("order", "place", "--user", "alice", "--items", "1:5")
        result = catalog("order", "admin-cancel", "--id", "1")
        assert result.exit_code == 0
        assert "cancelled by admin" in result.output
        assert ADMIN_CANCEL_REMINDER in result.output

    def test_buyer_cannot_cancel_someone_elses_order(self, catalog):
        catalog("order", "place", "--user", "alice", "--items", "1:1")
        result = catalog("order", "cancel", "--id", "1", "--user", "bob")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_deliver_and_list(self, catalog):
        catalog("order", "place", "--user", "alice", "--items", "1:1")
        catalog("order", "place", "--user", "bob", "--items", "2:1", "--pending")
        assert catalog("order", "deliver", "--id", "1").exit_code == 0

        delivered = catalog("order", "list", "--status", "delivered")
        assert "alice" in delivered.output
        assert "bob" not in delivered.output

    def test_deliver_pending_rejected(self, catalog):
        catalog("order", "place", "--user", "alice", "--items", "1:1", "--pending")
        result = catalog("order", "deliver", "--id", "1")
        assert result.exit_code == 1
        assert "cannot be delivered" in result.output


class TestInventoryCommands:

    def test_set_stock(self, catalog):
        result = catalog("inventory", "set", "--product", "2", "--quantity", "0")
        assert result.exit_code == 0
        assert "Stock for 'Gadget' set to 0" in result.output
        assert "no" in catalog("inventory", "show").output


class TestReviewCommands:

    def test_review_flow(self, catalog):
        added = catalog("review", "add", "--user", "alice", "--product", "1",
                        "--rating", "5", "--comment", "Great widget")
        assert added.exit_code == 0
        assert "Review #1 added to product #1" in added.output

        denied = catalog("review", "update", "--id", "1", "--user", "bob",
                         "--rating", "1", "--comment", "Vandalism")
        assert denied.exit_code == 1
        assert "Not authorized" in denied.output

        listed = catalog("review", "list", "--product", "1")
        assert "*****" in listed.output
        assert "Great widget" in listed.output

        assert catalog("review", "delete", "--id", "1", "--admin").exit_code == 0
        assert "No reviews yet." in catalog("review", "list", "--product", "1").output

    def test_reconcile_with_nothing_to_fix(self, catalog):
        result = catalog("review", "reconcile")
        assert result.exit_code == 0
        assert "All ratings are up to date." in result.output
