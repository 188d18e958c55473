"""
Pytest fixtures for mythline tests.
"""

import pytest
from pathlib import Path

from ..line import Condition, ConditionScope, SchedulingModifiers, SkillLine


@pytest.fixture
def mob_line_text() -> str:
    """A typical mob skill line as written in a Skills: list."""
    return "- damage{amount=10;ignorearmor=true} @target ~onTimer{interval=20} ?health{value=50}"


@pytest.fixture
def full_line() -> SkillLine:
    """A SkillLine using every segment."""
    return SkillLine(
        mechanic="projectile",
        mechanic_params={"onTick": "fire_tick", "v": "8", "i": "1"},
        targeter="EntitiesInRadius",
        targeter_params={"r": "10"},
        trigger="onDamaged",
        conditions=[
            Condition(name="isPlayer"),
            Condition(name="hasaura", params="aura=frozen", negated=True),
            Condition(name="height", params="h=2to5", scope=ConditionScope.TRIGGER),
        ],
    )


@pytest.fixture
def scheduled_line() -> SkillLine:
    """A line whose timing lives in SchedulingModifiers."""
    return SkillLine(
        mechanic="message",
        mechanic_params={"m": "hi"},
        modifiers=SchedulingModifiers(repeat=3, repeat_interval=20, delay=40),
    )


@pytest.fixture
def lines_file(tmp_path: Path) -> Path:
    """A skill list file with comments, blank rows and messy spacing."""
    path = tmp_path / "skills.txt"
    path.write_text(
        "# Mob skills\n"
        "- damage{ amount = 10 } @target ~onAttack\n"
        "\n"
        "-   heal{amount=5}   @self ~onDamaged ?!isBurning\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def broken_lines_file(tmp_path: Path) -> Path:
    """A skill list file whose third row cannot be decoded."""
    path = tmp_path / "broken.txt"
    path.write_text(
        "- heal @self ~onSpawn\n"
        "# comment\n"
        "- damage{amount=10 @target ~onAttack\n",
        encoding="utf-8",
    )
    return path
