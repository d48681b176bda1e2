"""Tests for the command line interface."""

import pytest

from splitboard.cli.main import cli


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Run a CLI command against the temporary database."""

    def run(*args):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])

    return run


class TestBoardCommands:
    """Tests for board commands."""

    def test_create_and_list(self, invoke):
        result = invoke("board", "create", "Parks", "--description", "Green spaces")

        assert result.exit_code == 0
        assert "Created board 'Parks' (ID: 1)" in result.output

        result = invoke("board", "list")
        assert result.exit_code == 0
        assert "Parks" in result.output

    def test_list_empty(self, invoke):
        result = invoke("board", "list")

        assert result.exit_code == 0
        assert "No boards found." in result.output

    def test_create_with_invalid_range(self, invoke):
        result = invoke("board", "create", "Parks", "--min", "500", "--max", "100")

        assert result.exit_code == 1
        assert "cannot exceed" in result.output

    def test_show(self, invoke, sample_board):
        result = invoke("board", "show", str(sample_board.id))

        assert result.exit_code == 0
        assert "Board: City Budget" in result.output
        assert "Description: Where taxes go" in result.output
        assert "Budget range: no limits" in result.output

    def test_show_missing(self, invoke):
        result = invoke("board", "show", "99")

        assert result.exit_code == 1
        assert "Board 99 not found" in result.output

    def test_settings(self, invoke, sample_board):
        result = invoke("board", "settings", str(sample_board.id), "--min", "10", "--max", "100")

        assert result.exit_code == 0
        assert "budget range $10 - $100 USD" in result.output

    def test_budget(self, invoke, sample_board):
        result = invoke("board", "budget", str(sample_board.id), "--user", "alice", "250")
        assert result.exit_code == 0
        assert "Budget for alice on 'City Budget' set to $250" in result.output

        result = invoke("board", "budget", str(sample_board.id), "--user", "alice")
        assert result.exit_code == 0
        assert "Budget for alice on 'City Budget' is $250" in result.output

    def test_budget_out_of_range(self, invoke, board_service):
        from splitboard.domain.entities import BoardSettings

        board_id = board_service.create_board("Parks", settings=BoardSettings(max_allocation=100))

        result = invoke("board", "budget", str(board_id), "--user", "alice", "500")

        assert result.exit_code == 1
        assert "at most 100" in result.output


class TestCategoryCommands:
    """Tests for category commands."""

    def test_create_and_list(self, invoke, sample_board):
        board = str(sample_board.id)

        result = invoke("category", "create", "Healthcare", "--board", board)
        assert result.exit_code == 0
        assert "Created category 'Healthcare' (ID: 1)" in result.output

        result = invoke("category", "create", "Medicare", "--board", board, "--parent", "Healthcare")
        assert result.exit_code == 0
        assert "Created category 'Medicare' under 'Healthcare'" in result.output

        result = invoke("category", "list", "--board", board)
        assert result.exit_code == 0
        assert "Healthcare (ID: 1)" in result.output
        assert "  Medicare (ID: 2)" in result.output

    def test_list_empty(self, invoke, sample_board):
        result = invoke("category", "list", "--board", str(sample_board.id))

        assert "No categories found." in result.output

    def test_create_under_missing_parent(self, invoke, sample_board):
        result = invoke("category", "create", "X", "--board", str(sample_board.id), "--parent", "Nowhere")

        assert result.exit_code == 1
        assert "Category 'Nowhere' not found" in result.output

    def test_delete(self, invoke, sample_board, sample_categories):
        result = invoke("category", "delete", "Healthcare", "--board", str(sample_board.id))

        assert result.exit_code == 0
        assert "Deleted 'Healthcare' and 2 subcategories" in result.output

    def test_delete_missing(self, invoke, sample_board):
        result = invoke("category", "delete", "Nowhere", "--board", str(sample_board.id))

        assert result.exit_code == 1
        assert "Category 'Nowhere' not found" in result.output


class TestAllocateCommands:
    """Tests for allocate commands."""

    def test_set_root_level(self, invoke, sample_board, sample_categories, distribution_service):
        result = invoke(
            "allocate", "set", "--board", str(sample_board.id), "--user", "alice",
            "Healthcare=60", "Education=40%",
        )

        assert result.exit_code == 0
        assert "Saved allocations at the root level for alice" in result.output
        distribution = distribution_service.get_distribution(sample_board.id, "alice")
        assert distribution.as_map() == {
            sample_categories["Healthcare"]: 60,
            sample_categories["Education"]: 40,
        }

    def test_set_child_level(self, invoke, sample_board, sample_categories):
        board = str(sample_board.id)
        invoke("allocate", "set", "--board", board, "--user", "alice", "Healthcare=100")

        result = invoke(
            "allocate", "set", "--board", board, "--user", "alice",
            "--parent", "Healthcare", "Medicare=75", "Medicaid=25",
        )

        assert result.exit_code == 0
        assert "Saved allocations under 'Healthcare' for alice" in result.output

    def test_set_incomplete_level(self, invoke, sample_board, sample_categories, distribution_service):
        result = invoke(
            "allocate", "set", "--board", str(sample_board.id), "--user", "alice", "Healthcare=60",
        )

        assert result.exit_code == 1
        assert "must sum to 100%, got 60%" in result.output
        assert distribution_service.get_distribution(sample_board.id, "alice") is None

    def test_set_unknown_category(self, invoke, sample_board, sample_categories):
        result = invoke(
            "allocate", "set", "--board", str(sample_board.id), "--user", "alice", "Nope=100",
        )

        assert result.exit_code == 1
        assert "Category 'Nope' not found" in result.output

    def test_set_malformed_assignment(self, invoke, sample_board, sample_categories):
        result = invoke(
            "allocate", "set", "--board", str(sample_board.id), "--user", "alice", "Healthcare",
        )

        assert result.exit_code == 1
        assert "Expected NAME=PERCENT" in result.output

    def test_set_out_of_range(self, invoke, sample_board, sample_categories):
        result = invoke(
            "allocate", "set", "--board", str(sample_board.id), "--user", "alice", "Healthcare=120",
        )

        assert result.exit_code == 1
        assert "between 0 and 100" in result.output

    def test_show(self, invoke, sample_board, sample_categories):
        board = str(sample_board.id)
        invoke("allocate", "set", "--board", board, "--user", "alice", "Healthcare=60", "Defense=40")
        invoke(
            "allocate", "set", "--board", board, "--user", "alice",
            "--parent", "Healthcare", "Medicare=50", "Medicaid=50",
        )

        result = invoke("allocate", "show", "--board", board, "--user", "alice", "--budget", "1000")

        assert result.exit_code == 0
        assert "budget $1000" in result.output
        assert "Healthcare" in result.output
        assert "$600" in result.output
        assert "$300" in result.output
        assert "$400" in result.output

    def test_show_nothing_saved(self, invoke, sample_board):
        result = invoke("allocate", "show", "--board", str(sample_board.id), "--user", "alice")

        assert result.exit_code == 0
        assert "No allocations saved." in result.output


class TestSummaryCommand:
    """Tests for the summary command."""

    @pytest.fixture
    def allocated(self, invoke, sample_board, sample_categories):
        board = str(sample_board.id)
        invoke("allocate", "set", "--board", board, "--user", "alice", "Healthcare=60", "Defense=40")
        invoke("allocate", "set", "--board", board, "--user", "bob", "Healthcare=20", "Education=80")
        return board

    def test_root_summary(self, invoke, allocated):
        result = invoke("summary", "--board", allocated)

        assert result.exit_code == 0
        assert "Allocation Summary (2 participants):" in result.output
        assert "Healthcare" in result.output
        assert "40%" in result.output
        assert "2/2" in result.output

    def test_level_summary(self, invoke, allocated):
        invoke(
            "allocate", "set", "--board", allocated, "--user", "alice",
            "--parent", "Healthcare", "Medicare=100",
        )

        result = invoke("summary", "--board", allocated, "--level", "Healthcare")

        assert result.exit_code == 0
        assert "Medicare" in result.output
        assert "Defense" not in result.output

    def test_level_and_all_conflict(self, invoke, allocated):
        result = invoke("summary", "--board", allocated, "--level", "Healthcare", "--all")

        assert result.exit_code == 1
        assert "Error: --level cannot be combined with --all" in result.output

    def test_unknown_level(self, invoke, allocated):
        result = invoke("summary", "--board", allocated, "--level", "Nowhere")

        assert result.exit_code == 1
        assert "Error: Category 'Nowhere' not found" in result.output

    def test_empty(self, invoke, sample_board):
        result = invoke("summary", "--board", str(sample_board.id))

        assert result.exit_code == 0
        assert "No allocations found." in result.output


class TestImmediateSaves:
    """Tests for allocate set when the save window is zero."""

    @pytest.fixture
    def invoke_now(self, cli_runner, temp_db):
        def run(*args):
            return cli_runner.invoke(
                cli,
                ["--db-path", temp_db.database_path, *args],
                env={"SPLITBOARD_SAVE_DELAY_MS": "0"},
            )

        return run

    def test_complete_level_saved_every_time(
        self, invoke_now, sample_board, sample_categories, distribution_service
    ):
        ids = sample_categories
        for healthcare in [60, 30, 75, 10, 50]:
            education = 100 - healthcare
            result = invoke_now(
                "allocate", "set", "--board", str(sample_board.id), "--user", "alice",
                f"Healthcare={healthcare}", f"Education={education}",
            )

            assert result.exit_code == 0, result.output
            assert "Saved allocations at the root level for alice" in result.output
            distribution = distribution_service.get_distribution(sample_board.id, "alice")
            assert distribution.as_map() == {
                ids["Healthcare"]: healthcare,
                ids["Education"]: education,
            }

    def test_incomplete_level_reported(
        self, invoke_now, sample_board, sample_categories, distribution_service
    ):
        result = invoke_now(
            "allocate", "set", "--board", str(sample_board.id), "--user", "alice", "Healthcare=60",
        )

        assert result.exit_code == 1
        assert "must sum to 100%, got 60%" in result.output
        assert distribution_service.get_distribution(sample_board.id, "alice") is None


class TestBoardDelete:
    """Tests for board delete."""

    def test_delete_confirmed(self, cli_runner, temp_db, sample_board, board_service):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "board", "delete", str(sample_board.id)],
            input="y\n",
        )

        assert result.exit_code == 0
        assert "Deleted board 'City Budget'" in result.output
        assert board_service.get_board(sample_board.id) is None

    def test_delete_cancelled(self, cli_runner, temp_db, sample_board, board_service):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "board", "delete", str(sample_board.id)],
            input="n\n",
        )

        assert result.exit_code == 0
        assert "Deletion cancelled." in result.output
        assert board_service.get_board(sample_board.id) is not None

    def test_delete_missing(self, invoke):
        result = invoke("board", "delete", "99")

        assert result.exit_code == 1
        assert "Board 99 not found" in result.output
