from __future__ import annotations

import discord
from config.defaults import COMMAND_DESCRIPTIONS
from config.defaults import EMBED_COLOUR
from config.defaults import HELP_EMBED_SPLIT_AT
from config.messages import BotMessages


def build_help_embeds(messages: BotMessages) -> list[discord.Embed]:
    items = list(COMMAND_DESCRIPTIONS.items())
    pages = [items[:HELP_EMBED_SPLIT_AT], items[HELP_EMBED_SPLIT_AT:]]
    titles = [messages.help_title, messages.help_title_continued]

    embeds: list[discord.Embed] = []
    for title, page in zip(titles, pages):
        if not page:
            continue
        embed = discord.Embed(
            title=title,
            colour=discord.Colour(EMBED_COLOUR),
            timestamp=discord.utils.utcnow(),
        )
        for name, description in page:
            embed.add_field(name=f"/{name}", value=description, inline=False)
        embeds.append(embed)
    return embeds
