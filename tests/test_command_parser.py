import pytest

from chat_warden.core.commands import (
    Ban,
    CommandError,
    CreateTask,
    DeleteTask,
    GlobalBan,
    Kick,
    ListTasks,
    SetRole,
    StartGroup,
    Stats,
    Unban,
    Warn,
    parse_command,
)


def test_create_defaults_repeat_count_to_one():
    command = parse_command("!bind 09:00 reminder")
    assert command == CreateTask(time_of_day="09:00", text="reminder", repeat_count=1)


def test_create_takes_trailing_integer_as_repeat_count():
    command = parse_command("!bind 9:05 всем   привет 3")
    assert command == CreateTask(time_of_day="09:05", text="всем привет", repeat_count=3)


@pytest.mark.parametrize(
    "text",
    [
        "!bind",
        "!bind 09:00",
        "!bind 25:99 text",
        "!bind 09-00 text",
        "!bind 09:00 5",
        "!bind 09:00 text 0",
        "!bind 09:00 text -2",
    ],
)
def test_create_validation_errors(text):
    result = parse_command(text)
    assert isinstance(result, CommandError)
    assert result.command == "!bind"
    assert result.reason


def test_create_error_reasons_are_specific():
    assert "времени" in parse_command("!bind 24:00 text").reason
    assert "пуст" in parse_command("!bind 10:00 7").reason
    assert "повтор" in parse_command("!bind 10:00 text 0").reason


def test_list_and_delete():
    assert parse_command("!tasks") == ListTasks()
    assert parse_command("!deltask 2") == DeleteTask(index=2)
    assert isinstance(parse_command("!deltask two"), CommandError)
    assert isinstance(parse_command("!deltask"), CommandError)
    assert isinstance(parse_command("!deltask -1"), CommandError)
    assert isinstance(parse_command("!deltask ²"), CommandError)
    assert isinstance(parse_command("!deltask 1 2"), CommandError)


def test_commands_are_case_sensitive_and_exact():
    assert parse_command("!BIND 09:00 text") is None
    assert parse_command("!binder 09:00 text") is None
    assert parse_command("hello there") is None
    assert parse_command("") is None


def test_moderation_commands():
    assert parse_command("/начать") == StartGroup()
    assert parse_command("!stats") == Stats()
    assert parse_command("!setrole 15 админ") == SetRole(target_id=15, role="админ")
    assert isinstance(parse_command("!setrole 15 king"), CommandError)
    assert isinstance(parse_command("!setrole 15"), CommandError)
    assert parse_command("!warn [id77|Вася]") == Warn(target_id=77)
    assert parse_command("!warn") == Warn(target_id=None)
    assert isinstance(parse_command("!warn somebody"), CommandError)
    assert parse_command("!ban id5 спам и флуд") == Ban(target_id=5, reason="спам и флуд")
    assert parse_command("!ban флуд") == Ban(target_id=None, reason="флуд")
    assert parse_command("!kick 9") == Kick(target_id=9, reason="")
    assert parse_command("!unban @id9") == Unban(target_id=9)
    assert parse_command("!aban 3 scam") == GlobalBan(target_id=3, reason="scam")


def test_target_mention_with_spaces_in_name():
    assert parse_command("!ban [id42|Вася Пупкин] реклама") == Ban(target_id=42, reason="реклама")
    assert parse_command("!setrole [id8|Анна Ким] пользователь") == SetRole(target_id=8, role="пользователь")
