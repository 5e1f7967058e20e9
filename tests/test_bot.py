from unittest.mock import MagicMock, patch

import pytest

from portfolio_tracker import bot, config


@pytest.fixture
def bot_env(monkeypatch):
    for name in ("DISCORD_TOKEN", "ALERT_CHANNEL_ID", "PORTFOLIO_STORE", "REFRESH_INTERVAL"):
        monkeypatch.delenv(name, raising=False)
    with patch.object(config, "load_dotenv"), patch.object(bot, "setup_logging"):
        yield monkeypatch


def test_main_exits_before_building_bot_without_token(bot_env):
    bot_env.setenv("ALERT_CHANNEL_ID", "1344038761868165211")

    with patch.object(bot, "create_bot") as create_bot:
        with pytest.raises(SystemExit) as exc_info:
            bot.main()

    assert exc_info.value.code == 1
    create_bot.assert_not_called()


def test_main_exits_without_alert_channel(bot_env):
    bot_env.setenv("DISCORD_TOKEN", "token")

    with patch.object(bot, "create_bot") as create_bot:
        with pytest.raises(SystemExit) as exc_info:
            bot.main()

    assert exc_info.value.code == 1
    create_bot.assert_not_called()


def test_main_runs_bot_with_token(bot_env):
    bot_env.setenv("DISCORD_TOKEN", "token")
    bot_env.setenv("ALERT_CHANNEL_ID", "1344038761868165211")
    client = MagicMock()

    with patch.object(bot, "create_bot", return_value=client) as create_bot:
        bot.main()

    settings = create_bot.call_args.args[0]
    assert settings.alert_channel_id == 1344038761868165211
    client.run.assert_called_once_with("token", log_handler=None)
