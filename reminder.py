# reminder.py - Rust reminders for GrindBot

import logging
import datetime as dt

import discord
from discord.ext import tasks
from discord import Embed

from config import LOCAL_TZ, REMINDER_HOUR
from helpers import get_rusting_users, now_ms

log = logging.getLogger(__name__)

# Global reference to bot - will be set when imported
bot = None

def setup_reminders(bot_instance):
    """Initialize the reminder system with bot instance"""
    global bot
    bot = bot_instance

    if not daily_reminder_task.is_running():
        daily_reminder_task.start()
        log.info("Daily rust reminder task started")

@tasks.loop(time=dt.time(hour=REMINDER_HOUR, minute=0, tzinfo=LOCAL_TZ))
async def daily_reminder_task():
    """DM users whose blade started rusting"""
    try:
        await send_rust_reminders()
    except discord.DiscordException:
        log.exception("Error in daily reminder task")

def build_reminder_embed(name: str, multiplier: float, hours_idle: float) -> Embed:
    embed = Embed(
        title="🟫 Your blade is rusting",
        description=f"Hey {name}! It's been **{int(hours_idle)}h** since your last practice.",
        colour=0xb45309
    )
    embed.add_field(
        name="Score multiplier",
        value=f"×{multiplier:.2f} (floor ×0.80)",
        inline=True
    )
    embed.add_field(
        name="Clean it",
        value="Log a session with `/log`, `/start` or one `/sharpen` to reset the rust.",
        inline=False
    )
    embed.set_footer(text="💡 Use /reminders to turn these off")
    return embed

async def send_rust_reminders():
    if not bot:
        log.warning("Bot not initialized for reminders")
        return

    rusting = get_rusting_users(now_ms())
    if not rusting:
        log.info("Nobody is rusting today")
        return

    sent = 0
    for user_id, multiplier, hours_idle in rusting:
        try:
            user = bot.get_user(int(user_id)) or await bot.fetch_user(int(user_id))
        except discord.HTTPException as e:
            log.warning("Could not resolve user %s: %s", user_id, e)
            continue

        try:
            await user.send(embed=build_reminder_embed(user.display_name, multiplier, hours_idle))
            sent += 1
        except discord.Forbidden:
            log.info("Cannot DM %s - DMs disabled", user.display_name)
        except discord.HTTPException as e:
            log.warning("Error DMing %s: %s", user.display_name, e)

    log.info("Sent %d rust reminders", sent)

def stop_reminder_task():
    """Stop the reminder task (for cleanup)"""
    if daily_reminder_task.is_running():
        daily_reminder_task.stop()
        log.info("Daily rust reminder task stopped")
