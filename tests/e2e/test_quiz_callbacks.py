import asyncio

import pytest

from career_bot.i18n import t
from career_bot.models import ChatState
from tests.fakes import FakeLLM
from tests.telegram_harness.harness import BotHarness

USER = 222


async def _to_quiz(harness: BotHarness) -> None:
    for text in ("/start", "Alex", "Class 10", "Design", "Not satisfied", "Data Science"):
        await harness.send_text(user_id=USER, text=text)
    assert harness.store.get(USER).conversation.state is ChatState.IN_QUIZ


@pytest.mark.asyncio
async def test_answered_question_shows_selection_and_ignores_second_click():
    harness = BotHarness.create(llm=FakeLLM())
    try:
        await _to_quiz(harness)
        message, callbacks = harness.open_question(USER)

        await harness.click(from_user_id=USER, chat_id=USER, message=message, data=callbacks[2])

        edited = harness.message_by_id(USER, message.message_id)
        labels = [b.text for row in edited.reply_markup.inline_keyboard for b in row]
        assert labels == ["A", "B", "✅ C", "D"]
        assert {b.callback_data for row in edited.reply_markup.inline_keyboard for b in row} == {"quiz:done"}

        # the same button again, from a stale copy of the keyboard
        await harness.click(from_user_id=USER, chat_id=USER, message=message, data=callbacks[1])
        await harness.click(from_user_id=USER, chat_id=USER, message=message, data="quiz:done")

        quiz = harness.store.get(USER).conversation.session.quiz
        assert quiz.user_answers == (2,)
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_typed_letter_answers_the_open_question():
    harness = BotHarness.create(llm=FakeLLM())
    try:
        await _to_quiz(harness)
        await harness.send_text(user_id=USER, text="b")
        await harness.send_text(user_id=USER, text="4")

        quiz = harness.store.get(USER).conversation.session.quiz
        assert quiz.user_answers == (1, 3)
        assert "Question 3/5" in harness.bot_texts(USER)[-1]
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_free_text_during_quiz_gets_a_hint():
    harness = BotHarness.create(llm=FakeLLM())
    try:
        await _to_quiz(harness)
        await harness.send_text(user_id=USER, text="not sure about this one")
        assert harness.bot_texts(USER)[-1] == t("quiz_use_options")
        assert harness.store.get(USER).conversation.session.quiz.user_answers == ()
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_voice_toggle_speaks_replies():
    harness = BotHarness.create(llm=FakeLLM())
    try:
        await harness.send_text(user_id=USER, text="/start")
        await harness.send_text(user_id=USER, text="/voice")
        assert harness.bot_texts(USER)[-1] == t("voice_on")

        await harness.send_text(user_id=USER, text="Alex")
        for _ in range(20):
            if harness.bot.session.audio_by_chat.get(USER):
                break
            await asyncio.sleep(0)
        assert len(harness.bot.session.audio_by_chat[USER]) == 1

        await harness.send_text(user_id=USER, text="/voice")
        assert harness.bot_texts(USER)[-1] == t("voice_off")
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_voice_message_is_transcribed_and_answered():
    llm = FakeLLM(transcribe="my name is Asha", extract_name="Asha")
    harness = BotHarness.create(llm=llm)
    try:
        await harness.send_text(user_id=USER, text="/start")
        await harness.send_voice(user_id=USER)

        (audio, mime_type), = llm.called("transcribe")
        assert audio == harness.bot.session.download_content
        assert mime_type == "audio/ogg"
        assert harness.store.get(USER).conversation.session.student_name == "Asha"
        assert harness.bot_texts(USER)[-1] == t("ask_class_level", name="Asha")
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_unintelligible_voice_message_asks_again():
    harness = BotHarness.create(llm=FakeLLM(transcribe="  "))
    try:
        await harness.send_text(user_id=USER, text="/start")
        await harness.send_voice(user_id=USER)
        assert harness.bot_texts(USER)[-1] == t("voice_not_understood")
        assert harness.store.get(USER).conversation.state is ChatState.AWAITING_NAME
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_answered_keyboards_are_forgotten():
    harness = BotHarness.create(llm=FakeLLM())
    try:
        await _to_quiz(harness)
        view = harness.store.get(USER).view
        assert len(view.open_keyboards) == 1

        message, callbacks = harness.open_question(USER)
        await harness.click(from_user_id=USER, chat_id=USER, message=message, data=callbacks[0])
        (newest,) = view.open_keyboards.values()
        assert newest == harness.open_question(USER)[0].message_id

        for _ in range(4):
            message, callbacks = harness.open_question(USER)
            await harness.click(from_user_id=USER, chat_id=USER, message=message, data=callbacks[0])

        assert view.open_keyboards == {}
        assert harness.store.get(USER).conversation.state is ChatState.AWAITING_FINAL_FEEDBACK
    finally:
        await harness.close()
