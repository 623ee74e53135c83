import asyncio
import logging
import datetime as dt
from typing import Dict, List

import discord
from discord import app_commands
from discord.ext import commands, tasks
from discord import Embed

import reminder
import ai_updates
import rank_storage
from config import TOKEN, LOCAL_TZ, DEV_USER_IDS, DIGEST_HOUR, TICK_SECONDS, TICK_LIFETIME
from storage import (
    load, save, user_record, find_theme, add_theme, add_session,
    add_sharpen_log, add_slash_log,
)
from population import DEMOGRAPHICS, WORLD_POPULATION, population_for, bucket_label
from ranks import level_progress
from tiers import next_tier
from themes import THEME_ICONS, SUGGESTED_ACTIONS, icon_for
from decay import rust_level
from engine import snapshot, commit_grind
from phases import percentile_from_hours, rank_ratio
from world_rank import next_milestone, people_to_overtake
from odometer import frames, frame_delay, LINEAR, EASE_OUT
from helpers import (
    now_ms, activity_state_for, calculate_streak, total_seconds, today_seconds,
    running_seconds, motivation_for_streak, toggle_user_reminders,
    format_rank, format_clock, format_mmss, format_rust,
)

log = logging.getLogger(__name__)

intents = discord.Intents.default()

# realtime view refreshes: one edit per odometer frame
REALTIME_STEPS = 2
REVEAL_STEPS = 5


class GrindBot(commands.Bot):
    def __init__(self):
        super().__init__(
            command_prefix="!",
            intents=intents,
            help_command=None
        )
        # user id -> running realtime ticker
        self.tickers: Dict[int, asyncio.Task] = {}

    async def setup_hook(self):
        await self.tree.sync()
        log.info("Synced %d command(s)", len(self.tree.get_commands()))

    def cancel_ticker(self, user_id: int):
        task = self.tickers.pop(user_id, None)
        if task and not task.done():
            task.cancel()

    def forget_ticker(self, user_id: int, task):
        """Drop a finished ticker, unless a newer one already took its slot."""
        if self.tickers.get(user_id) is task:
            del self.tickers[user_id]

    async def close(self):
        for user_id in list(self.tickers):
            self.cancel_ticker(user_id)
        reminder.stop_reminder_task()
        await super().close()

bot = GrindBot()


def _record_for(data, user):
    return user_record(data, str(user.id))


async def theme_autocomplete(
    interaction: discord.Interaction,
    current: str,
) -> List[app_commands.Choice[str]]:
    record = user_record(load(), str(interaction.user.id))
    return [
        app_commands.Choice(name=t["title"], value=t["id"])
        for t in record["themes"]
        if current.lower() in t["title"].lower()
    ][:25]  # Discord limit


# -------- themes & sessions -------------
@bot.tree.command(name="newtheme", description="Create a practice theme")
@app_commands.describe(title="What you're practising", icon="Icon for the theme")
@app_commands.choices(icon=[
    app_commands.Choice(name=f"{emoji} {name}", value=name) for name, emoji in THEME_ICONS.items()
])
async def newtheme(interaction: discord.Interaction, title: str, icon: str = "book"):
    data = load()
    record = _record_for(data, interaction.user)
    if find_theme(record, title):
        return await interaction.response.send_message(
            f"You already have a theme called **{title}**.", ephemeral=True
        )
    theme = add_theme(record, title.strip(), icon, now_ms())
    save(data)
    await interaction.response.send_message(
        f"{icon_for(theme['icon'])} Theme **{theme['title']}** created. Use `/start` to begin."
    )


@bot.tree.command(name="themes", description="List your practice themes")
async def themes(interaction: discord.Interaction):
    record = _record_for(load(), interaction.user)
    if not record["themes"]:
        return await interaction.response.send_message(
            "No themes yet. Create one with `/newtheme`.", ephemeral=True
        )

    now = now_ms()
    embed = Embed(title=f"📚 Themes for {interaction.user.display_name}", colour=0x3498db)
    for t in record["themes"]:
        secs = t["total_seconds"] + running_seconds(record, now, t["id"])
        prog = level_progress(secs)
        running = " ⏱️" if running_seconds(record, now, t["id"]) else ""
        embed.add_field(
            name=f"{icon_for(t['icon'])} {t['title']}{running}",
            value=f"{format_clock(secs)} • {prog['current']['emoji']} {prog['current']['name']}",
            inline=False
        )
    await interaction.response.send_message(embed=embed)


@bot.tree.command(name="start", description="Start the stopwatch on a theme")
@app_commands.describe(theme="Theme to practise")
@app_commands.autocomplete(theme=theme_autocomplete)
async def start(interaction: discord.Interaction, theme: str):
    data = load()
    record = _record_for(data, interaction.user)
    found = find_theme(record, theme)
    if not found:
        return await interaction.response.send_message(f"Unknown theme: {theme}", ephemeral=True)
    if record["stopwatch"]:
        return await interaction.response.send_message(
            "⏱️ A stopwatch is already running. Use `/stop` first.", ephemeral=True
        )

    record["stopwatch"] = {"theme_id": found["id"], "started_at": now_ms()}
    save(data)
    await interaction.response.send_message(
        f"⏱️ Stopwatch started on {icon_for(found['icon'])} **{found['title']}**. "
        "Try `/realtime` to watch your rank move."
    )


@bot.tree.command(name="stop", description="Stop the stopwatch and save the session")
@app_commands.describe(note="What did you push on? (optional)")
async def stop(interaction: discord.Interaction, note: str = ""):
    data = load()
    record = _record_for(data, interaction.user)
    watch = record["stopwatch"]
    if not watch:
        return await interaction.response.send_message("No stopwatch running.", ephemeral=True)

    theme = find_theme(record, watch["theme_id"])
    now = now_ms()
    record["stopwatch"] = None
    if theme is None or now - watch["started_at"] < 1000:
        save(data)
        return await interaction.response.send_message("Session discarded.", ephemeral=True)

    session = add_session(record, theme, watch["started_at"], now, note)
    save(data)
    bot.cancel_ticker(interaction.user.id)
    await interaction.response.send_message(embed=session_embed(record, theme, session, now))


@bot.tree.command(name="log", description="Log a finished practice session")
@app_commands.describe(theme="Theme practised", minutes="Session length", note="Optional note")
@app_commands.autocomplete(theme=theme_autocomplete)
async def log_session(interaction: discord.Interaction, theme: str,
                      minutes: app_commands.Range[int, 1, 1440], note: str = ""):
    data = load()
    record = _record_for(data, interaction.user)
    found = find_theme(record, theme)
    if not found:
        return await interaction.response.send_message(f"Unknown theme: {theme}", ephemeral=True)

    now = now_ms()
    session = add_session(record, found, now - minutes * 60_000, now, note)
    save(data)
    await interaction.response.send_message(embed=session_embed(record, found, session, now))


def session_embed(record, theme, session, now) -> Embed:
    streak = calculate_streak(record["sessions"], now)
    text, highlight = motivation_for_streak(streak)
    prog = level_progress(theme["total_seconds"])

    embed = Embed(
        title=f"✅ Session saved: {format_clock(session['duration_seconds'])}",
        description=f"{icon_for(theme['icon'])} **{theme['title']}**",
        colour=0x2ecc71
    )
    embed.add_field(name="Today", value=format_clock(today_seconds(record, theme["id"], now)), inline=True)
    embed.add_field(name="Total", value=format_clock(theme["total_seconds"]), inline=True)
    embed.add_field(name="🔥 Streak", value=f"{streak} day{'s' if streak != 1 else ''}", inline=True)
    embed.add_field(name=highlight, value=text, inline=False)
    if prog["next"]:
        embed.set_footer(text=f"{prog['hours_to_next']:,}h to {prog['next']['name']}")
    if session["note"]:
        embed.add_field(name="📝 Note", value=session["note"], inline=False)
    return embed


@bot.tree.command(name="sharpen", description="Log one tiny sharpening action")
@app_commands.describe(action="The action you just did")
async def sharpen(interaction: discord.Interaction, action: str):
    data = load()
    record = _record_for(data, interaction.user)
    add_sharpen_log(record, action.strip(), now_ms())
    save(data)
    count = len(record["sharpen_logs"])
    await interaction.response.send_message(
        f"🗡️ Sharpened: **{action}** (#{count}). Each action is worth 3 TGI."
    )


# -------- profile & levels -------------
@bot.tree.command(name="profile", description="Set the demographics used for rank filters")
@app_commands.choices(
    age=[app_commands.Choice(name=k, value=k) for k in DEMOGRAPHICS["age"]],
    gender=[app_commands.Choice(name=k, value=k) for k in DEMOGRAPHICS["gender"]],
    region=[app_commands.Choice(name=k, value=k) for k in DEMOGRAPHICS["region"]],
)
async def profile(interaction: discord.Interaction, age: str = None, gender: str = None, region: str = None):
    data = load()
    record = _record_for(data, interaction.user)
    for key, value in (("age", age), ("gender", gender), ("region", region)):
        if value:
            record["profile"][key] = value
    save(data)

    prof = record["profile"]
    lines = [f"- **{k.title()}:** {prof.get(k, 'unset')}" for k in ("age", "gender", "region")]
    await interaction.response.send_message(
        embed=Embed(title="👤 Profile", description="\n".join(lines), colour=0x9b59b6),
        ephemeral=True
    )


@bot.tree.command(name="level", description="Show your practice level")
@app_commands.describe(theme="Limit to one theme (optional)")
@app_commands.autocomplete(theme=theme_autocomplete)
async def level(interaction: discord.Interaction, theme: str = None):
    record = _record_for(load(), interaction.user)
    theme_id = None
    title = "All themes"
    if theme:
        found = find_theme(record, theme)
        if not found:
            return await interaction.response.send_message(f"Unknown theme: {theme}", ephemeral=True)
        theme_id, title = found["id"], found["title"]

    now = now_ms()
    secs = total_seconds(record, theme_id) + running_seconds(record, now, theme_id)
    prog = level_progress(secs)

    BAR_LEN = 14
    filled = max(0, min(BAR_LEN, round(prog["percent"] / 100 * BAR_LEN)))
    bar = "█" * filled + "░" * (BAR_LEN - filled)

    cur = prog["current"]
    embed = Embed(
        title=f"{cur['emoji']} {cur['name']}",
        description=f"{title} • {format_clock(secs)}\n`{bar}` {prog['percent']:.1f}%",
        colour=0xf59e0b
    )
    nxt = prog["next"]["name"] if prog["next"] else "MAX"
    embed.add_field(name=f"Next: {nxt}", value=f"{prog['hours_to_next']:,} hours to go", inline=True)
    if prog["hours_to_after"] is not None:
        embed.add_field(name="The one after", value=f"{prog['hours_to_after']:,} hours", inline=True)
    await interaction.response.send_message(embed=embed)


# -------- world rank -------------
@bot.tree.command(name="worldrank", description="Your simulated world rank from TGI")
async def worldrank(interaction: discord.Interaction):
    record = _record_for(load(), interaction.user)
    now = now_ms()
    state = activity_state_for(record, now)
    snap = snapshot(state, now)

    target = snap.next_milestone
    upcoming = next_tier(snap.tgi)
    embed = Embed(
        title=f"🌍 World Rank No. {format_rank(snap.rank)}",
        description=(
            f"Tier **{snap.tier['name']}** • TGI **{snap.tgi:,.1f}**\n"
            f"About 1 in **{format_rank(max(1, WORLD_POPULATION // snap.rank))}** people\n"
            f"{format_rust(snap.decay_multiplier)}"
        ),
        colour=0xb45309 if snap.decay_multiplier < 1.0 else 0x6366f1
    )
    embed.add_field(
        name="🎯 Next target",
        value=f"{target['emoji']} {target['name']}: {format_rank(people_to_overtake(snap.rank, target))} to go",
        inline=False
    )
    embed.add_field(
        name="Inputs",
        value=(
            f"🗡️ {state.total_actions} actions • 🔥 {state.streak_days} day streak • "
            f"⏱️ {state.total_active_seconds // 60:,} min"
        ),
        inline=False
    )
    if upcoming:
        embed.set_footer(text=f"{upcoming['min_tgi'] - snap.tgi:,.1f} TGI to {upcoming['name']}")
    await interaction.response.send_message(embed=embed)


def realtime_embed(record, now, filter_type, theme_id, displayed_rank=None):
    population = population_for(filter_type, record["profile"])
    secs = total_seconds(record, theme_id) + running_seconds(record, now, theme_id)
    reading = percentile_from_hours(secs / 3600, population)
    rank = reading.rank if displayed_rank is None else displayed_rank

    decimals = 5 if reading.velocity == "High" else 4
    embed = Embed(
        title=f"⚡ {reading.title} ({reading.phase})",
        description=(
            f"Top **{reading.percentile:.{decimals}f}%** • No. **{format_rank(rank)}**\n"
            f"About 1 in **{format_rank(rank_ratio(reading.percentile))}** people\n"
            f"_{reading.message}_"
        ),
        colour=0xf97316 if reading.phase == "P2" else 0x0f172a
    )
    embed.add_field(name="Population", value=bucket_label(filter_type, record["profile"]), inline=True)
    embed.add_field(name="Overtaking", value=f"{reading.speed_per_second:,.1f} people/s", inline=True)
    embed.add_field(name="Practice", value=format_clock(secs), inline=True)
    if reading.velocity == "High":
        embed.set_footer(text="RANK RISING FAST!")
    return embed, reading.rank


async def run_realtime(interaction: discord.Interaction, filter_type: str, theme_id: str):
    """Edit the realtime view until its lifetime runs out or it is replaced."""
    record = _record_for(load(), interaction.user)
    _, displayed = realtime_embed(record, now_ms(), filter_type, theme_id)
    elapsed = 0
    try:
        while elapsed < TICK_LIFETIME:
            await asyncio.sleep(TICK_SECONDS)
            elapsed += TICK_SECONDS
            record = _record_for(load(), interaction.user)
            now = now_ms()
            _, target = realtime_embed(record, now, filter_type, theme_id)
            for value in frames(displayed, target, LINEAR, REALTIME_STEPS):
                embed, _ = realtime_embed(record, now, filter_type, theme_id, value)
                await interaction.edit_original_response(embed=embed)
                displayed = value
                await asyncio.sleep(frame_delay(LINEAR, REALTIME_STEPS))
        embed, _ = realtime_embed(record, now_ms(), filter_type, theme_id)
        embed.set_footer(text="⏸️ Live view paused. Run /realtime again.")
        await interaction.edit_original_response(embed=embed)
    except discord.HTTPException as e:
        log.warning("Realtime view for %s stopped: %s", interaction.user.id, e)
    finally:
        bot.forget_ticker(interaction.user.id, asyncio.current_task())


@bot.tree.command(name="realtime", description="Live hours-based ranking")
@app_commands.describe(scope="Population to rank against", theme="Limit to one theme (optional)")
@app_commands.choices(scope=[
    app_commands.Choice(name="World", value="global"),
    app_commands.Choice(name="Age group", value="age"),
    app_commands.Choice(name="Gender", value="gender"),
    app_commands.Choice(name="Region", value="region"),
])
@app_commands.autocomplete(theme=theme_autocomplete)
async def realtime(interaction: discord.Interaction, scope: str = "global", theme: str = None):
    record = _record_for(load(), interaction.user)
    theme_id = None
    if theme:
        found = find_theme(record, theme)
        if not found:
            return await interaction.response.send_message(f"Unknown theme: {theme}", ephemeral=True)
        theme_id = found["id"]

    embed, _ = realtime_embed(record, now_ms(), scope, theme_id)
    await interaction.response.send_message(embed=embed)

    # only a running stopwatch moves the numbers
    if record["stopwatch"]:
        bot.cancel_ticker(interaction.user.id)
        bot.tickers[interaction.user.id] = asyncio.create_task(
            run_realtime(interaction, scope, theme_id)
        )


# -------- grinding -------------
@bot.tree.command(name="grind", description="Start a grind session")
async def grind(interaction: discord.Interaction):
    data = load()
    record = _record_for(data, interaction.user)
    if record["grind"]:
        return await interaction.response.send_message(
            "⚔️ You're already grinding. `/slash` when you're done.", ephemeral=True
        )

    uid = str(interaction.user.id)
    stats = rank_storage.load(uid)
    now = now_ms()
    record["grind"] = {"started_at": now}
    save(data)

    rust = rust_level(stats["last_slashed_at"], now)
    target = next_milestone(stats["current_rank"])
    embed = Embed(
        title=f"⚔️ Grinding... World Ranking No. {format_rank(stats['current_rank'])}",
        description="Accumulating energy. Every minute is worth 1 TGI.",
        colour=0xb45309 if rust > 0 else 0x4f46e5
    )
    if rust > 0:
        embed.add_field(name="🟫 Rust", value=f"{rust * 100:.0f}%: the blade needs this.", inline=False)
    embed.add_field(
        name="🎯 Next target",
        value=f"{target['emoji']} {target['name']}: {format_rank(people_to_overtake(stats['current_rank'], target))} to go",
        inline=False
    )
    await interaction.response.send_message(embed=embed)


@bot.tree.command(name="slash", description="Finish the grind session and cash in")
async def slash(interaction: discord.Interaction):
    data = load()
    record = _record_for(data, interaction.user)
    if not record["grind"]:
        return await interaction.response.send_message("Start with `/grind` first.", ephemeral=True)

    uid = str(interaction.user.id)
    now = now_ms()
    elapsed = max(0, (now - record["grind"]["started_at"]) // 1000)
    record["grind"] = None

    stats = rank_storage.load(uid)
    result, new_stats = commit_grind(stats, elapsed, now)
    rank_storage.save(uid, new_stats)
    add_slash_log(record, result, now)
    save(data)

    def reveal(rank):
        embed = Embed(
            title="⚡ SLASH COMPLETE",
            description=f"World Ranking No. **{format_rank(rank)}**",
            colour=0xfacc15
        )
        embed.add_field(name="Session", value=f"{format_mmss(elapsed)} • +{result.earned_tgi:.2f} TGI", inline=True)
        embed.add_field(name="Overtaken", value=f"{format_rank(result.overtaken_count)} people", inline=True)
        if result.crossed:
            embed.add_field(
                name="🏳️ Countries cut through",
                value="\n".join(f"{m['emoji']} **{m['name']}**" for m in result.crossed[:2]),
                inline=False
            )
        return embed

    await interaction.response.send_message(embed=reveal(result.rank_before))
    try:
        for value in frames(result.rank_before, result.rank_after, EASE_OUT, REVEAL_STEPS):
            await asyncio.sleep(frame_delay(EASE_OUT, REVEAL_STEPS))
            await interaction.edit_original_response(embed=reveal(value))
    except discord.HTTPException as e:
        log.warning("Slash reveal for %s cut short: %s", uid, e)


# -------- reminders & digest -------------
@bot.tree.command(name="reminders", description="Toggle rust reminders")
async def toggle_reminders(interaction: discord.Interaction):
    enabled = toggle_user_reminders(str(interaction.user.id))

    if enabled:
        embed = Embed(
            title="🔔 Reminders Enabled",
            description=f"You'll get a DM around {reminder.REMINDER_HOUR}:00 when your blade starts rusting.",
            colour=0x2ecc71
        )
    else:
        embed = Embed(
            title="🔕 Reminders Disabled",
            description="You won't receive rust reminders anymore.",
            colour=0xe74c3c
        )
    await interaction.response.send_message(embed=embed, ephemeral=True)


@bot.tree.command(name="digest", description="Send the daily world-rank digest now")
@app_commands.default_permissions(administrator=True)
async def manual_digest(interaction: discord.Interaction):
    await interaction.response.defer()
    try:
        await ai_updates.send_daily_digest(bot)
        await interaction.followup.send("✅ Digest sent!")
    except Exception as e:
        log.exception("Manual digest failed")
        await interaction.followup.send(f"❌ Failed to send digest: {e}", ephemeral=True)


@bot.tree.command(name="testreminder", description="Send rust reminders now (dev only)")
@app_commands.default_permissions(administrator=True)
async def test_reminder(interaction: discord.Interaction):
    if interaction.user.id not in DEV_USER_IDS:
        return await interaction.response.send_message("Dev only command.", ephemeral=True)

    await interaction.response.send_message("Sending rust reminders...", ephemeral=True)
    await reminder.send_rust_reminders()


@tasks.loop(time=dt.time(hour=DIGEST_HOUR, minute=0, tzinfo=LOCAL_TZ))
async def daily_digest_task():
    try:
        await ai_updates.send_daily_digest(bot)
    except Exception:
        log.exception("Daily digest failed")

@daily_digest_task.before_loop
async def before_daily_digest():
    await bot.wait_until_ready()


@bot.tree.command(name="help", description="Show all available commands")
async def help_slash(interaction: discord.Interaction):
    embed = Embed(title="📖 GrindBot commands", colour=0x00aaff)
    embed.add_field(
        name="Practice",
        value=(
            "`/newtheme` `/themes` create and list themes\n"
            "`/start` `/stop` stopwatch a session\n"
            "`/log` add a finished session\n"
            "`/sharpen` log one tiny action"
        ),
        inline=False
    )
    embed.add_field(
        name="Rankings",
        value=(
            "`/worldrank` TGI world rank and rust\n"
            "`/realtime` live hours-based ranking\n"
            "`/level` practice level\n"
            "`/profile` age/gender/region filters"
        ),
        inline=False
    )
    embed.add_field(name="Grinding", value="`/grind` then `/slash` to cash in", inline=False)
    embed.add_field(
        name="Sharpen ideas",
        value=", ".join(SUGGESTED_ACTIONS),
        inline=False
    )
    embed.set_footer(text="`/reminders` toggles rust DMs")
    await interaction.response.send_message(embed=embed, ephemeral=True)


# simple ping-pong sanity check
@bot.tree.command(name="ping", description="Check bot responsiveness")
async def ping(interaction: discord.Interaction):
    await interaction.response.send_message("pong!")

@bot.event
async def on_ready():
    log.info("Logged in as %s", bot.user)

    reminder.setup_reminders(bot)

    if not daily_digest_task.is_running():
        daily_digest_task.start()
        log.info("Daily digest scheduler started")

if __name__ == "__main__":
    if not TOKEN:
        raise ValueError("DISCORD_TOKEN not found in environment variables")
    bot.run(TOKEN, root_logger=True)
