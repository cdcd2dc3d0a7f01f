import argparse
import asyncio
import logging
import sys

from career_bot.choices import resolve_choice
from career_bot.config import load_llm_settings
from career_bot.dialogue import Conversation
from career_bot.keyboards import LETTERS
from career_bot.llm import LLMClient
from career_bot.models import ChatMessage, ChatState, Sender
from career_bot.render import render_message


class ConsoleTranscript:
    def __init__(self, out=None) -> None:
        self._out = out or sys.stdout

    async def message_added(self, index: int, message: ChatMessage) -> None:
        if message.sender is Sender.USER:
            return
        for kwargs in render_message(message):
            self._out.write(f"bot> {kwargs['text']}\n")
        self._out.flush()

    async def message_answered(self, index: int, message: ChatMessage) -> None:
        if message.selected_option is not None:
            self._out.write(f"     (answered {LETTERS[message.selected_option]})\n")


async def run(llm: LLMClient) -> None:
    conversation = Conversation(llm, listener=ConsoleTranscript(), conversation_id="console")
    await conversation.start()
    while True:
        try:
            line = await asyncio.to_thread(input, "you> ")
        except EOFError:
            break
        if line.strip() in {"/quit", "/exit"}:
            break
        if conversation.state is ChatState.IN_QUIZ:
            option_index = resolve_choice(line, conversation.current_options)
            if option_index is not None:
                await conversation.submit_option(option_index)
                continue
        await conversation.submit_text(line)


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Talk to the career guide in a terminal.")
    parser.add_argument("--model", help="override LLM_MODEL")
    parser.add_argument("--verbose", action="store_true", default=False)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = load_llm_settings()
    except RuntimeError as exc:
        print(f"ERROR: {exc}")
        return 1
    llm = LLMClient.from_settings(settings)
    if args.model:
        llm.model = args.model
    asyncio.run(run(llm))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
