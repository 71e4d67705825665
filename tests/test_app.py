"""Tests for the Streamlit budget planner page (headless, temp data directory)."""

import json
from pathlib import Path

import streamlit as st
from streamlit.testing.v1 import AppTest

from rupeewise.models import EXPENSE_CATEGORIES


APP_PATH = Path(__file__).resolve().parents[1] / "app" / "main.py"


def open_budget_page() -> AppTest:
    st.cache_resource.clear()
    at = AppTest.from_file(str(APP_PATH), default_timeout=30)
    at.run()
    at.sidebar.radio[0].set_value("🎯 Budget Planner").run()
    return at


def food_limit(at: AppTest):
    return next(n for n in at.number_input if n.label == "Food limit")


def food_save_button(at: AppTest):
    saves = [b for b in at.button if b.label == "Save"]
    return saves[EXPENSE_CATEGORIES.index("Food")]


class TestBudgetPlanner:
    """Tests that budget limits are written only when saved."""

    def test_editing_a_limit_does_not_save_it(self, tmp_path):
        at = open_budget_page()

        food_limit(at).set_value(5000.0)
        at.run()

        assert not at.exception
        assert not (tmp_path / "data" / "rupeeWise_budgets.json").exists()

    def test_save_button_writes_the_limit(self, tmp_path):
        at = open_budget_page()

        food_limit(at).set_value(5000.0)
        food_save_button(at).click()
        at.run()

        assert not at.exception
        saved = json.loads((tmp_path / "data" / "rupeeWise_budgets.json").read_text(encoding="utf-8"))
        assert saved == [{"category": "Food", "limit": 5000}]
