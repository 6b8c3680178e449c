import logging
from typing import List, Optional

import discord
from discord.ext import commands

from src.cup_draft.application.cup_service import CupApplicationService
from src.cup_draft.domain.entities.cup import Cup
from src.cup_draft.domain.entities.cup_status import CupStatus
from src.cup_draft.domain.entities.player import Player
from src.cup_draft.domain.exceptions import (
    AlreadyStartedError,
    CupError,
    CupNotFoundError,
    UnauthorizedError,
)
from src.cup_draft.presentation.cup_presenter import CupPresenter
from src.cup_draft.presentation.report import ReportSection
from src.utils.decorators import command_handler
from .base_commands import BaseCommands

logger = logging.getLogger(__name__)


def _parse_number(token: str) -> Optional[int]:
    try:
        return int(token)
    except ValueError:
        return None


class CupDraftCommands(BaseCommands):
    """Draft cup commands, all invoked as '<prefix> <command>'"""

    def __init__(
        self,
        bot: commands.Bot,
        service: CupApplicationService,
        presenter: Optional[CupPresenter] = None
    ) -> None:
        """Initialize draft cup commands

        Args:
            bot: Discord bot instance
            service: Cup use cases
            presenter: Message builder, bound to the bot's command prefix
        """
        super().__init__()
        self.bot = bot
        self.service = service
        self.presenter = presenter or CupPresenter(engine=service.engine)

    # ===================
    # Chat Bookkeeping
    # ===================

    async def _remove_last_reply(self, ctx: commands.Context) -> None:
        previous = self.service.set_last_reply(self.get_channel_id(ctx), "")
        await self._delete_reply(ctx, previous)

    async def _delete_reply(self, ctx: commands.Context, message_id: Optional[str]) -> None:
        if message_id:
            await self.delete_message(ctx.channel.get_partial_message(int(message_id)))

    async def _reply(self, ctx: commands.Context, cup: Cup, text: str = "",
                     sections: Optional[ReportSection] = None) -> None:
        """Replace the previous status reply with text plus a report"""
        await self._remove_last_reply(ctx)
        if sections is None:
            sections = self.presenter.status_sections(cup)
        text += self.presenter.report(cup, sections)
        message = await self.send_response(ctx, text)
        if message is not None:
            self.service.set_last_reply(self.get_channel_id(ctx), str(message.id))

    async def _delete_and_reply(self, ctx: commands.Context, cup: Cup, text: str = "",
                                sections: Optional[ReportSection] = None) -> None:
        await self._remove_last_reply(ctx)
        await self.delete_message(ctx.message)
        await self._reply(ctx, cup, text, sections)

    async def _bot_pins(self, ctx: commands.Context) -> List[discord.Message]:
        """Messages the bot pinned in this channel, newest first"""
        try:
            pinned = await ctx.channel.pins()
        except discord.HTTPException as e:
            logger.warning(f"Could not list pinned messages in {ctx.channel.id}: {e}")
            return []

        bot_user = self.bot.user
        if bot_user is None:
            return []
        return [message for message in pinned if message.author.id == bot_user.id]

    async def _unpin_all(self, ctx: commands.Context) -> None:
        """Unpin every message the bot pinned in this channel"""
        for message in await self._bot_pins(ctx):
            try:
                await message.unpin()
            except discord.HTTPException as e:
                logger.debug(f"Could not unpin message {message.id}: {e}")

    async def _last_pinned_text(self, ctx: commands.Context) -> str:
        """Last cup message the bot pinned here, for channels without a cup"""
        pinned = await self._bot_pins(ctx)
        if not pinned:
            return ""
        message = pinned[0]
        age = (discord.utils.utcnow() - message.created_at).total_seconds()
        return self.presenter.last_pinned(message.content, age)

    async def _pin(self, message: discord.Message) -> None:
        try:
            await message.pin()
        except discord.HTTPException as e:
            logger.warning(f"Could not pin message {message.id}: {e}")

    async def _report_error(self, ctx: commands.Context, error: CupError, command: str,
                            extra: str = "") -> None:
        """Explain a failed command, followed by the current status"""
        channel_id = self.get_channel_id(ctx)
        name = self.get_user_name(ctx)

        if isinstance(error, CupNotFoundError):
            others = self.service.other_active_channels(self.get_guild_id(ctx), channel_id)
            await self.send_response(ctx, self.presenter.no_cup_here(name, others) + extra)
            return

        text = self.presenter.error(error, name, self.get_user_id(ctx), command) + extra
        await self.send_response(ctx, text)

        cup = self.service.get_cup(channel_id)
        if cup is not None:
            await self._reply(ctx, cup)

    def _author_player(self, ctx: commands.Context) -> Player:
        return Player(user_id=self.get_user_id(ctx), display_name=self.get_user_name(ctx))

    # ===================
    # Listeners
    # ===================

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """Answer the bare prefix with help and delete chat in moderated channels"""
        if message.author.bot:
            return

        prefix = self.presenter.prefix
        content = message.content.strip().lower()
        if content.startswith(prefix):
            if content == prefix:
                await self.send_info(message.channel, "Draft commands", self.presenter.help_text())
            return

        if self.service.is_moderated(str(message.channel.id)):
            await self.delete_message(message)

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CommandNotFound) and ctx.invoked_with:
            await self.send_response(ctx, self.presenter.unknown_command(ctx.invoked_with.lower()))
            await self.send_info(ctx, "Draft commands", self.presenter.help_text())

    # ===================
    # Commands
    # ===================

    @commands.command(name="help", help="Show this list")
    @command_handler()
    async def help(self, ctx: commands.Context) -> None:
        await self._handle_help(ctx)

    async def _handle_help(self, ctx: commands.Context) -> None:
        await self.send_info(ctx, "Draft commands", self.presenter.help_text())

    @commands.command(name="start", help="Start a new cup, with an optional description")
    @command_handler()
    async def start(self, ctx: commands.Context, *, description: str = "") -> None:
        await self._handle_start(ctx, description)

    async def _handle_start(self, ctx: commands.Context, description: str = "") -> None:
        channel_id = self.get_channel_id(ctx)
        name = self.get_user_name(ctx)
        try:
            cup = self.service.start_cup(
                channel_id,
                self._author_player(ctx),
                guild_id=self.get_guild_id(ctx),
                description=description.strip()
            )
        except AlreadyStartedError as e:
            await self._report_error(ctx, e, "start")
            return

        await self.delete_message(ctx.message)
        announcement = await self.send_response(
            ctx, self.presenter.start_announcement(name, cup.description)
        )
        if announcement is None:
            logger.error(f"Unable to send cup start message in {channel_id}, aborting cup")
            self.service.discard_cup(channel_id)
            return

        await self._unpin_all(ctx)
        self.service.set_start_message(channel_id, str(announcement.id))
        await self._pin(announcement)

    @commands.command(name="abort", help="Abort current cup")
    @command_handler()
    async def abort(self, ctx: commands.Context) -> None:
        await self._handle_abort(ctx)

    async def _handle_abort(self, ctx: commands.Context) -> None:
        try:
            self.service.abort_cup(self.get_channel_id(ctx), self.get_user_id(ctx))
        except CupError as e:
            await self._report_error(ctx, e, "abort")
            return

        await self.send_response(ctx, self.presenter.aborted(self.get_user_name(ctx)))
        await self._unpin_all(ctx)

    @commands.command(name="add", help="Sign up to play in the cup")
    @command_handler()
    async def add(self, ctx: commands.Context) -> None:
        await self._handle_add(ctx)

    async def _handle_add(self, ctx: commands.Context) -> None:
        try:
            result = self.service.sign_up(self.get_channel_id(ctx), self._author_player(ctx))
        except CupError as e:
            await self._report_error(ctx, e, "add")
            return

        if result.substitute_number is not None:
            await self.send_response(
                ctx, self.presenter.substitute_joined(result.player, result.substitute_number)
            )
        await self._delete_and_reply(ctx, result.cup, sections=ReportSection.ALL)

    @commands.command(name="remove", help="Remove yourself from the cup (or another player, if manager)")
    @command_handler()
    async def remove(self, ctx: commands.Context, number: str = "") -> None:
        await self._handle_remove(ctx, number)

    async def _handle_remove(self, ctx: commands.Context, number: str = "") -> None:
        channel_id = self.get_channel_id(ctx)
        user_id = self.get_user_id(ctx)

        index = None
        if number:
            cup = self.service.get_cup(channel_id)
            parsed = _parse_number(number)
            if parsed is None and cup is not None and cup.is_manager(user_id):
                await self.send_response(
                    ctx, self.presenter.not_a_number(self.get_user_name(ctx), number, "remove")
                )
                await self._reply(ctx, cup, sections=ReportSection.ALL)
                return
            index = (parsed - 1) if parsed is not None else -1

        try:
            result = self.service.withdraw(channel_id, user_id, index)
        except UnauthorizedError as e:
            cup = self.service.get_cup(channel_id)
            registered = cup is not None and cup.find_player(user_id) is not None
            await self._report_error(ctx, e, "remove", self.presenter.remove_hint(registered))
            return
        except CupError as e:
            await self._report_error(ctx, e, "remove")
            return

        announcement = self.presenter.withdrawn(result.outcome, result.cup.status)
        if announcement:
            await self.send_response(ctx, announcement)
        await self._delete_and_reply(ctx, result.cup, sections=ReportSection.ALL)

    @commands.command(name="who", help="Show list of players in cup")
    @command_handler()
    async def who(self, ctx: commands.Context) -> None:
        await self._handle_who(ctx)

    async def _handle_who(self, ctx: commands.Context) -> None:
        try:
            cup = self.service.who(self.get_channel_id(ctx))
        except CupNotFoundError as e:
            await self._report_error(ctx, e, "who", await self._last_pinned_text(ctx))
            return
        except CupError as e:
            await self._report_error(ctx, e, "who")
            return
        await self._delete_and_reply(ctx, cup, sections=ReportSection.ALL)

    @commands.command(name="moderate", help="Enable/disable or toggle channel moderation when a cup is active")
    @command_handler()
    async def moderate(self, ctx: commands.Context, option: str = "") -> None:
        await self._handle_moderate(ctx, option)

    async def _handle_moderate(self, ctx: commands.Context, option: str = "") -> None:
        channel_id = self.get_channel_id(ctx)
        name = self.get_user_name(ctx)

        option = option.lower()
        enabled: Optional[bool] = None
        if option == "on":
            enabled = True
        elif option == "off":
            enabled = False
        elif option:
            cup = self.service.get_cup(channel_id)
            if cup is None:
                await self._report_error(ctx, CupNotFoundError(channel_id), "moderate")
                return
            await self.send_response(ctx, self.presenter.invalid_moderation_option(name, option))
            await self._reply(ctx, cup)
            return

        try:
            changed = self.service.set_moderation(channel_id, self.get_user_id(ctx), enabled)
        except CupError as e:
            await self._report_error(ctx, e, "moderate")
            return

        cup = self.service.require_cup(channel_id)
        text = self.presenter.moderation(name, cup.moderated, changed)
        if changed:
            await self.delete_message(ctx.message)
            await self.send_response(ctx, text)
        else:
            await self.send_response(ctx, text)
            await self._reply(ctx, cup)

    @commands.command(name="teamsize", help="Show or change current team size")
    @command_handler()
    async def teamsize(self, ctx: commands.Context, size: str = "") -> None:
        await self._handle_teamsize(ctx, size)

    async def _handle_teamsize(self, ctx: commands.Context, size: str = "") -> None:
        channel_id = self.get_channel_id(ctx)
        name = self.get_user_name(ctx)

        cup = self.service.get_cup(channel_id)
        if cup is None:
            await self._report_error(ctx, CupNotFoundError(channel_id), "teamsize")
            return
        await self.delete_message(ctx.message)

        if not size:
            await self.send_response(ctx, self.presenter.team_size(name, cup.team_size))
            await self._reply(ctx, cup)
            return

        requested = _parse_number(size)
        if requested is None and cup.is_manager(self.get_user_id(ctx)) and cup.status == CupStatus.SIGNUP:
            await self.send_response(ctx, self.presenter.not_a_number(name, size, "teamsize"))
            await self._reply(ctx, cup)
            return

        try:
            changed = self.service.set_team_size(
                channel_id, self.get_user_id(ctx), requested if requested is not None else 0
            )
        except CupError as e:
            await self._report_error(ctx, e, "teamsize")
            return

        await self.send_response(ctx, self.presenter.team_size(name, requested, changed))
        await self._reply(ctx, cup)

    @commands.command(name="close", help="Close cup for sign-ups, optionally keeping only [number] players")
    @command_handler()
    async def close(self, ctx: commands.Context, count: str = "") -> None:
        await self._handle_close(ctx, count)

    async def _handle_close(self, ctx: commands.Context, count: str = "") -> None:
        channel_id = self.get_channel_id(ctx)
        user_id = self.get_user_id(ctx)

        keep_count = None
        if count:
            keep_count = _parse_number(count)
            cup = self.service.get_cup(channel_id)
            if keep_count is None and cup is not None and cup.is_manager(user_id):
                await self.send_response(
                    ctx, self.presenter.not_a_number(self.get_user_name(ctx), count, "close")
                )
                await self._reply(ctx, cup)
                return

        if count and keep_count is None:
            keep_count = -1

        try:
            cup = self.service.close_signup(channel_id, user_id, keep_count)
        except CupError as e:
            await self._report_error(ctx, e, "close")
            return

        await self.delete_message(ctx.message)
        await self._reply(ctx, cup, self.presenter.signup_closed(), ReportSection.ALL)

    @commands.command(name="pick", help="Pick the player with the given number")
    @command_handler()
    async def pick(self, ctx: commands.Context, number: str = "") -> None:
        await self._handle_pick(ctx, number)

    async def _handle_pick(self, ctx: commands.Context, number: str = "") -> None:
        channel_id = self.get_channel_id(ctx)
        user_id = self.get_user_id(ctx)
        name = self.get_user_name(ctx)

        cup = self.service.get_cup(channel_id)
        if cup is not None and cup.status == CupStatus.PICKUP:
            picker = self.service.engine.next_picker(cup)
            if picker is not None and picker.user_id == user_id:
                if not number:
                    await self.send_response(ctx, self.presenter.missing_pick_number(name))
                    await self._reply(ctx, cup)
                    return
                if _parse_number(number) is None:
                    await self.send_response(ctx, self.presenter.not_a_number(name, number, "pick"))
                    await self._reply(ctx, cup)
                    return

        parsed = _parse_number(number)
        index = parsed - 1 if parsed is not None else -1
        try:
            result = self.service.pick(channel_id, user_id, index)
        except CupError as e:
            await self._report_error(ctx, e, "pick")
            return

        if result.completed:
            await self._delete_reply(ctx, result.previous_reply_id)
        else:
            await self._remove_last_reply(ctx)
        await self.delete_message(ctx.message)
        await self.send_response(ctx, self.presenter.picked(result.outcome))

        if not result.completed:
            await self._reply(ctx, result.cup)
            return

        await self._unpin_all(ctx)
        final = await self.send_response(ctx, self.presenter.completed(result.cup))
        if final is not None:
            await self._pin(final)

    @commands.command(name="promote", help="Promote the cup")
    @command_handler()
    async def promote(self, ctx: commands.Context) -> None:
        await self._handle_promote(ctx)

    async def _handle_promote(self, ctx: commands.Context) -> None:
        try:
            cup = self.service.promote(self.get_channel_id(ctx), self.get_user_id(ctx))
        except CupError as e:
            await self._report_error(ctx, e, "promote")
            return

        await self.delete_message(ctx.message)
        await self.send_response(ctx, self.presenter.promotion(cup))
        await self._reply(ctx, cup, sections=ReportSection.ALL)

    @commands.command(name="reopen", help="Discard current teams and reopen cup for sign-up")
    @command_handler()
    async def reopen(self, ctx: commands.Context) -> None:
        await self._handle_reopen(ctx)

    async def _handle_reopen(self, ctx: commands.Context) -> None:
        try:
            cup = self.service.reopen(self.get_channel_id(ctx), self.get_user_id(ctx))
        except CupError as e:
            await self._report_error(ctx, e, "reopen")
            return

        await self.delete_message(ctx.message)
        await self._reply(ctx, cup, self.presenter.reopened(self.get_user_name(ctx)), ReportSection.ALL)
