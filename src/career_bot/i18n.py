from __future__ import annotations

STRINGS: dict[str, str] = {
    "greeting": "Hi there! 👋 I’m your career guidance assistant. To get started, could you please tell me your name?",
    "ask_class_level": "Great to meet you, {name}! Are you currently in Class 10 or Class 12?",
    "reask_class_level": "Please tell me if you're in 'Class 10' or 'Class 12'.",
    "ask_predicted_domain": "Perfect. Now, can you tell me what domain was predicted for you by our website?",
    "ask_stream": "Thanks! And which stream are you in? (e.g., Science, Commerce, Arts)",
    "stream_accepted": "Got it, {stream} stream. Now, can you tell me what domain was predicted for you by our website?",
    "reask_stream": "That doesn't seem like a valid academic stream. Please tell me your stream, such as Science, Commerce, or Arts.",
    "ask_satisfaction": (
        "So your predicted domain is {domain}. Are you satisfied with this domain, or would you like to "
        "explore other options? (Reply ‘Satisfied’ or ‘Not satisfied’.)"
    ),
    "reask_predicted_domain": (
        "That doesn't seem to be a valid career domain. Please tell me the domain that was predicted for you "
        "by our website (e.g., Data Science, Design, Accounting)."
    ),
    "ask_interested_domain": "No problem! Which domains interest you most? You can name 1–2 (e.g., Data Science, Design, Accounting).",
    "reask_interested_domain": (
        "That doesn't seem to be a valid career domain. Please name 1-2 domains you're interested in "
        "(e.g., Data Science, Design, Accounting)."
    ),
    "quiz_intro": "Great! Let's explore {domain}. I'll ask you 5 short multiple-choice questions to see if it's a good fit. Ready?",
    "quiz_question": "Question {number}/{total}: {question}",
    "quiz_failed": "Sorry, I couldn't put together a valid quiz for that domain. Please try a different domain.",
    "quiz_use_options": "Please select an option above.",
    "quiz_analyzing": "Thanks! Let me analyze your results...",
    "quiz_analysis_failed": "I had some trouble analyzing your results. Let's try exploring a domain directly. Which one interests you?",
    "reask_adjacent_choice": "Please choose one of the suggested domains, or name another one you're interested in.",
    "report_intro": "Awesome! I'm putting together a detailed guide and a personalized roadmap for {domain}. One moment...",
    "report_failed": "Sorry, I had trouble generating the guide for that domain. Please try another one.",
    "roadmap_intro": "Here is a personalized 12-month roadmap to get you started.",
    "ask_final_feedback": "So, what do you think? Does this sound like a good path for you, or would you prefer to explore a different domain?",
    "follow_up_open": "I'm glad this was helpful! Feel free to ask me any more questions you have.",
    "explore_again": (
        "No problem at all! Exploring is what this is all about. Which other domains interest you most? "
        "You can name 1–2 (e.g., Data Science, Design, Accounting)."
    ),
    "follow_up_missing": "Sorry, I can't continue the conversation right now. Please send /start to begin again.",
    "apology": "Sorry, something went wrong. Please try again later.",
    "voice_on": "🔊 Voice replies are on. Send /voice again to turn them off.",
    "voice_off": "🔇 Voice replies are off. Send /voice to turn them on.",
    "voice_not_understood": "Sorry, I couldn't make out that voice message. Could you try again or type it?",
}

def t(key: str, **kwargs: object) -> str:
    text = STRINGS.get(key, key)
    return text.format(**kwargs) if kwargs else text
