# ai_updates.py
import json
import logging
import os
from datetime import datetime

import discord
from openai import OpenAI

import rank_storage
from config import LOCAL_TZ, OPENAI_MODEL, DIGEST_CHANNEL
from storage import load, user_record
from engine import snapshot, default_grinding_stats
from helpers import activity_state_for, display_name_for, format_rank, now_ms

log = logging.getLogger(__name__)

# Initialize OpenAI client lazily
_client = None

def get_openai_client():
    """Get OpenAI client, initializing if needed"""
    global _client
    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY not found in environment variables")
        _client = OpenAI(api_key=api_key)
    return _client

def ask_gpt(system_content, user_content, max_tokens=500, temperature=0.6):
    """Make OpenAI API call"""
    client = get_openai_client()
    response = client.chat.completions.create(
        model=OPENAI_MODEL,
        messages=[
            {"role": "system", "content": system_content},
            {"role": "user", "content": user_content}
        ],
        max_tokens=max_tokens,
        temperature=temperature,
    )
    return response.choices[0].message.content.strip()

def gather_rank_context(now: int, names: dict = None):
    """Per-user engine snapshots for everyone with a record"""
    names = names or {}
    users = {}
    grinding = rank_storage.load_everyone()
    for uid, raw in load().items():
        record = user_record({uid: raw}, uid)
        snap = snapshot(activity_state_for(record, now), now)
        grind = grinding.get(uid) or default_grinding_stats()
        users[names.get(uid, uid[:6])] = {
            "tgi": round(snap.tgi, 1),
            "tier": snap.tier["name"],
            "world_rank": snap.rank,
            "phase": snap.phase,
            "percentile": round(snap.percentile, 5),
            "rust": snap.decay_multiplier,
            "grind_rank": grind["current_rank"],
            "best_grind_rank": grind["best_rank"],
        }
    return users

def format_status_lines(users: dict) -> str:
    lines = []
    for name in sorted(users):
        u = users[name]
        status = "🟫 rusting" if u["rust"] < 1.0 else "🗡️ sharp"
        lines.append(f"{name}: #{format_rank(u['world_rank'])} {u['tier']} ({status})")
    return "\n".join(lines)

async def generate_daily_digest(bot=None):
    now = now_ms()
    names = {}
    if bot:
        for uid in load():
            names[uid] = await display_name_for(uid, bot)
    users = gather_rank_context(now, names)

    system_prompt = """You are the narrator of a Discord bot that turns practice time into a simulated world ranking. Write a **very concise** 2-sentence recap of today's standings. Be playful but honest about anyone whose blade is rusting."""

    user_prompt = f"""Today's standings (lower rank is better, rust < 1.0 means the user skipped practice):

{json.dumps(users, indent=2, ensure_ascii=False)}

IMPORTANT: Be very concise with a **STRICT** character limit of 200!"""

    summary = ask_gpt(system_prompt, user_prompt) if users else ""
    return {
        "user_status": format_status_lines(users),
        "summary": summary
    }

async def send_daily_digest(bot):
    """Send the daily digest to the configured channel as an embed"""
    channel = None
    for guild in bot.guilds:
        channel = discord.utils.get(guild.channels, name=DIGEST_CHANNEL)
        if channel:
            break

    if not channel:
        log.warning("Digest channel #%s not found", DIGEST_CHANNEL)
        return

    digest = await generate_daily_digest(bot)

    embed = discord.Embed(
        title="🌍 Daily World Rank Digest",
        color=0x6366f1,
        timestamp=datetime.now(LOCAL_TZ)
    )
    if digest["user_status"].strip():
        embed.add_field(name="⚔️ Standings", value=f"```{digest['user_status']}```", inline=False)
    if digest["summary"].strip():
        embed.add_field(name="📋 Recap", value=digest["summary"], inline=False)
    embed.set_footer(text="Use /worldrank to see your own numbers.")

    await channel.send(embed=embed)
    log.info("Daily digest sent to #%s", DIGEST_CHANNEL)
