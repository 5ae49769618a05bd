import streamlit as st

# Page config - MUST be first Streamlit command
st.set_page_config(
    page_title="Access Hub",
    layout="centered"
)

import pillow_heif

from access_hub.config import (
    AAC_PHRASES,
    CHAT_REFRESH_SECONDS,
    IMAGE_EXTENSIONS,
    UI_CHAT_HEIGHT,
    UI_TEXT_AREA_HEIGHT,
    VIDEO_EXTENSIONS,
    SessionKey,
    configure_logging,
    load_settings,
)
from access_hub.auth import check_password, current_user, logout, set_user_name
from access_hub.database import (
    create_store,
    get_request,
    list_offers_for_volunteer,
    list_open_requests,
    list_pending_offers,
    list_requests_for_owner,
    list_sessions_for_participant,
    submit_offer,
    submit_request,
)
from access_hub.llm import get_available_models, init_ai_clients
from access_hub.models import ReactionType, RequestStatus, SessionStatus
from access_hub.community import add_comment, create_post, list_posts, toggle_reaction
from access_hub.tools import (
    add_phrase,
    chat_with_companion,
    daily_reflection,
    describe_surroundings,
    generate_easy_read_version,
    generate_lesson_quiz,
    generate_sign_cards,
    interpret_sign_language,
    read_text_from_image,
    remove_last_phrase,
    summarize_article,
)
from access_hub.ui import run_action, run_and_rerun
from access_hub.utils import format_chat_time, format_relative_date, initials
from access_hub.volunteer import (
    accept_offer,
    append_message,
    complete_session,
    decline_offer,
    poll_new_messages,
)

# Register HEIF/HEIC support with Pillow
pillow_heif.register_heif_opener()


@st.cache_resource
def get_settings():
    settings = load_settings(st.secrets)
    configure_logging(settings.log_level)
    return settings


@st.cache_resource
def get_store():
    return create_store(get_settings())


@st.cache_resource
def get_ai_clients():
    return init_ai_clients(get_settings())


settings = get_settings()

# Gate the entire app
if not check_password(settings.app_password):
    st.stop()

user = current_user(settings)
if user is None:
    st.title("Welcome")
    name = st.text_input("Your name", placeholder="How should volunteers address you?")
    if st.button("Continue", type="primary", disabled=not name.strip()):
        set_user_name(name.strip())
        st.rerun()
    st.stop()

store = get_store()
clients = get_ai_clients()

# ============== Session State ==============

if SessionKey.SELECTED_MODEL not in st.session_state:
    st.session_state[SessionKey.SELECTED_MODEL] = settings.default_model
if SessionKey.SELECTED_SESSION not in st.session_state:
    st.session_state[SessionKey.SELECTED_SESSION] = None
if SessionKey.COMPANION_HISTORY not in st.session_state:
    st.session_state[SessionKey.COMPANION_HISTORY] = []
if SessionKey.AAC_SENTENCE not in st.session_state:
    st.session_state[SessionKey.AAC_SENTENCE] = ""


# ============== Header ==============

col_title, col_user = st.columns([3, 1])
with col_title:
    st.title("Access Hub")
with col_user:
    st.caption(f"Signed in as **{user.name}**" + (" (coordinator)" if user.is_coordinator else ""))
    if st.button("Log out", icon=":material/logout:"):
        logout()
        st.rerun()

available_models = get_available_models(clients)
st.session_state[SessionKey.SELECTED_MODEL] = st.selectbox(
    "Model",
    available_models,
    index=available_models.index(st.session_state[SessionKey.SELECTED_MODEL])
    if st.session_state[SessionKey.SELECTED_MODEL] in available_models else 0,
)
model = st.session_state[SessionKey.SELECTED_MODEL]

(tab_communicate, tab_volunteer, tab_sessions, tab_community,
 tab_companion, tab_read, tab_see, tab_learn) = st.tabs([
    "Communicate", "Volunteer", "My Sessions", "Community",
    "Companion", "Read & News", "See & Sign", "Learn & Reflect",
])

# ============== Communicate ==============


def tap_phrase(label: str):
    st.session_state[SessionKey.AAC_SENTENCE] = add_phrase(st.session_state[SessionKey.AAC_SENTENCE], label)


def undo_phrase():
    st.session_state[SessionKey.AAC_SENTENCE] = remove_last_phrase(st.session_state[SessionKey.AAC_SENTENCE])


with tab_communicate:
    st.markdown("### AAC Board")
    st.caption("Tap words to build a sentence.")
    with st.container(border=True):
        st.markdown(f"## {st.session_state[SessionKey.AAC_SENTENCE] or '...'}")

    board = st.columns(4)
    for i, label in enumerate(AAC_PHRASES):
        board[i % 4].button(label, key=f"aac_{label}", on_click=tap_phrase, args=(label,), use_container_width=True)

    col_undo, col_clear = st.columns(2)
    col_undo.button("Undo", icon=":material/undo:", on_click=undo_phrase, use_container_width=True)
    if col_clear.button("Clear", icon=":material/backspace:", use_container_width=True):
        st.session_state[SessionKey.AAC_SENTENCE] = ""
        st.rerun()

# ============== Volunteer ==============

with tab_volunteer:
    find_col, ask_col = st.columns(2)

    with ask_col:
        st.markdown("### Request Help")
        with st.form("request_help_form", clear_on_submit=True):
            description = st.text_area(
                "Describe what you need help with. A volunteer can offer one hour of support.",
                placeholder="e.g., 'I need help practicing for a job interview.'",
                height=UI_TEXT_AREA_HEIGHT,
            )
            if st.form_submit_button("Submit Request", type="primary", use_container_width=True):
                run_action(
                    lambda: submit_request(store, user, description),
                    "Your help request is now visible to volunteers.",
                )

    with find_col:
        st.markdown("### Find Help Requests")
        open_requests = [r for r in run_action(lambda: list_open_requests(store)) or [] if r.owner_id != user.uid]
        if not open_requests:
            st.info("No open requests right now.")
        for request in open_requests:
            with st.container(border=True):
                st.markdown(request.description)
                st.caption(f"{request.duration_hours}h · posted {format_relative_date(request.created_at)}")
                if st.button("Offer 1 Hour", key=f"offer_{request.id}", icon=":material/volunteer_activism:"):
                    run_action(lambda: submit_offer(store, user, request.id), "Offer sent. Thank you!")

    st.divider()
    st.markdown("### My Requests")
    my_requests = run_action(lambda: list_requests_for_owner(store, user.uid)) or []
    if not my_requests:
        st.caption("You haven't asked for help yet.")
    for request in my_requests:
        with st.expander(f"{request.description[:60]} · {request.status.value}"):
            if request.status != RequestStatus.OPEN:
                st.caption(f"This request is {request.status.value}.")
                continue
            offers = run_action(lambda: list_pending_offers(store, request.id)) or []
            if not offers:
                st.caption("No offers yet.")
            for offer in offers:
                col_name, col_accept, col_decline = st.columns([2, 1, 1])
                col_name.markdown(f"**{offer.volunteer_name}** offered to help")
                if col_accept.button("Accept", key=f"accept_{offer.id}", type="primary"):
                    session = run_action(
                        lambda: accept_offer(store, user, request, offer, settings.sibling_offer_policy),
                        "Session started! Find it under My Sessions.",
                    )
                    if session:
                        st.session_state[SessionKey.SELECTED_SESSION] = session.id
                        st.rerun()
                if col_decline.button("Decline", key=f"decline_{offer.id}"):
                    run_and_rerun(lambda: decline_offer(store, user, offer.id), "Offer declined.")

    st.markdown("### My Offers")
    my_offers = run_action(lambda: list_offers_for_volunteer(store, user.uid)) or []
    if not my_offers:
        st.caption("You haven't offered help yet.")
    for offer in my_offers:
        st.markdown(f"- Offer on request `{offer.request_id[:8]}` · **{offer.status.value}**")

# ============== Sessions ==============


@st.fragment(run_every=CHAT_REFRESH_SECONDS)
def render_chat_log(session_id: str):
    messages = run_action(lambda: poll_new_messages(store, user, session_id, 0)) or []
    with st.container(height=UI_CHAT_HEIGHT):
        if not messages:
            st.caption("No messages yet. Say hello!")
        for msg in messages:
            is_me = msg.sender_id == user.uid
            with st.chat_message("user" if is_me else "assistant", avatar=None if is_me else initials(msg.sender_name)):
                st.markdown(msg.content)
                st.caption(f"{msg.sender_name} · {format_chat_time(msg.timestamp)}")


with tab_sessions:
    sessions = run_action(lambda: list_sessions_for_participant(store, user.uid)) or []
    if not sessions:
        st.info("No sessions yet. Accept an offer or volunteer to start one.")
    else:
        labels = {s.id: f"{format_relative_date(s.created_at)} · {s.status.value}" for s in sessions}
        ids = list(labels)
        selected = st.session_state[SessionKey.SELECTED_SESSION]
        session_id = st.selectbox(
            "Session",
            ids,
            index=ids.index(selected) if selected in ids else 0,
            format_func=lambda sid: labels[sid],
        )
        st.session_state[SessionKey.SELECTED_SESSION] = session_id
        session = next(s for s in sessions if s.id == session_id)

        request = run_action(lambda: get_request(store, session.request_id))
        if request:
            st.markdown(f"**Request:** {request.description}")

        render_chat_log(session_id)

        if session.status == SessionStatus.ACTIVE:
            text = st.chat_input("Type your message...")
            if text:
                run_and_rerun(lambda: append_message(store, user, session_id, text))
            if st.button("Mark session complete", icon=":material/task_alt:"):
                run_and_rerun(lambda: complete_session(store, user, session_id), "Session completed.")
        else:
            st.caption("This session is complete.")

# ============== Community ==============

REACTION_LABELS = {
    ReactionType.LIKE: ":material/favorite: Like",
    ReactionType.SUPPORT: ":material/volunteer_activism: Support",
    ReactionType.CELEBRATE: ":material/celebration: Celebrate",
}

with tab_community:
    st.markdown("### Community")
    st.caption("Share, connect, and find support.")
    with st.form("new_post_form", clear_on_submit=True):
        post_text = st.text_area("What's on your mind?", height=UI_TEXT_AREA_HEIGHT)
        if st.form_submit_button("Post", type="primary"):
            run_and_rerun(lambda: create_post(store, user, post_text), "Your post is now live in the community.")

    posts = run_action(lambda: list_posts(store)) or []
    if not posts:
        st.info("No posts yet. Be the first to share!")
    for post in posts:
        with st.container(border=True):
            st.markdown(f"**{post.user_name}** · {format_relative_date(post.created_at)}")
            st.markdown(post.content)

            counts = post.reaction_counts()
            mine = post.reaction_of(user.uid)
            reaction_cols = st.columns(len(REACTION_LABELS))
            for col, (reaction, label) in zip(reaction_cols, REACTION_LABELS.items()):
                if col.button(
                    f"{label} {counts[reaction] or ''}".strip(),
                    key=f"react_{post.id}_{reaction.value}",
                    type="primary" if mine == reaction else "secondary",
                ):
                    run_and_rerun(lambda: toggle_reaction(store, user, post.id, reaction) or True)

            with st.expander(f"Comments ({len(post.comments)})"):
                if not post.comments:
                    st.caption("No comments yet. Be the first!")
                for comment in post.comments:
                    st.markdown(f"**{comment.user_name}**: {comment.content}")
                with st.form(f"comment_form_{post.id}", clear_on_submit=True):
                    comment_text = st.text_input("Write a comment...", key=f"comment_{post.id}")
                    if st.form_submit_button("Comment"):
                        run_and_rerun(lambda: add_comment(store, user, post.id, comment_text))

# ============== Companion ==============

with tab_companion:
    history = st.session_state[SessionKey.COMPANION_HISTORY]
    for turn in history:
        with st.chat_message("user" if turn["role"] == "user" else "assistant"):
            st.markdown(turn["content"])

    photo = st.file_uploader("Attach a photo (optional)", type=IMAGE_EXTENSIONS, key="companion_photo")
    prompt = st.chat_input("Talk to your companion...", key="companion_input")
    if prompt:
        with st.spinner("Thinking..."):
            reply = run_action(lambda: chat_with_companion(
                clients, history, prompt, photo.getvalue() if photo else None, model
            ))
        if reply:
            history.append({"role": "user", "content": prompt})
            history.append({"role": "model", "content": reply["response"]})
            st.rerun()

    if history and st.button("Clear conversation", icon=":material/delete:"):
        st.session_state[SessionKey.COMPANION_HISTORY] = []
        st.rerun()

# ============== Read & News ==============

with tab_read:
    st.markdown("### Easy Read")
    source_text = st.text_area("Text to simplify", height=UI_TEXT_AREA_HEIGHT, key="easy_read_text")
    col_easy, col_cards = st.columns(2)
    if col_easy.button("Make it easy to read", use_container_width=True):
        with st.spinner("Simplifying..."):
            easy = run_action(lambda: generate_easy_read_version(clients, source_text, model))
        if easy:
            st.markdown(easy)
    if col_cards.button("Make sign cards", use_container_width=True):
        with st.spinner("Finding key concepts..."):
            cards = run_action(lambda: generate_sign_cards(clients, source_text, model))
        if cards:
            st.markdown(" ".join(f"`{card}`" for card in cards))

    st.divider()
    st.markdown("### News Summary")
    article = st.text_area("Paste a news article", height=UI_TEXT_AREA_HEIGHT * 2, key="article_text")
    if st.button("Summarize article", type="primary"):
        with st.spinner("Summarizing..."):
            summary = run_action(lambda: summarize_article(clients, article, model))
        if summary:
            st.markdown(summary.audio_summary)
            st.markdown("**Easy read**")
            st.markdown("\n".join(f"- {b}" for b in summary.easy_read_bullets))
            st.markdown("**Key facts**")
            st.markdown("\n".join(f"- {f}" for f in summary.key_facts))
            st.markdown("**Sign cards:** " + " ".join(f"`{c}`" for c in summary.sign_cards))

# ============== See & Sign ==============

with tab_see:
    st.markdown("### Read or Describe a Photo")
    image = st.file_uploader("Photo", type=IMAGE_EXTENSIONS, key="vision_photo")
    col_ocr, col_describe = st.columns(2)
    if image and col_ocr.button("Read text", use_container_width=True):
        with st.spinner("Reading..."):
            text = run_action(lambda: read_text_from_image(clients, image.getvalue(), model))
        if text is not None:
            st.text(text or "No text found.")
    if image and col_describe.button("Describe surroundings", use_container_width=True):
        with st.spinner("Looking..."):
            description = run_action(lambda: describe_surroundings(clients, image.getvalue(), model))
        if description:
            st.markdown(description)

    st.divider()
    st.markdown("### Sign Interpreter")
    video = st.file_uploader("Sign language clip", type=VIDEO_EXTENSIONS, key="sign_video")
    if video and st.button("Interpret", type="primary"):
        suffix = "." + video.name.rsplit(".", 1)[-1].lower()
        with st.spinner("Interpreting..."):
            interpreted = run_action(lambda: interpret_sign_language(clients, video.getvalue(), suffix, model))
        if interpreted:
            st.success(interpreted)

# ============== Learn & Reflect ==============

with tab_learn:
    st.markdown("### Lesson Quiz")
    lesson = st.text_area("Lesson text", height=UI_TEXT_AREA_HEIGHT, key="lesson_text")
    if st.button("Generate quiz"):
        with st.spinner("Writing questions..."):
            st.session_state["quiz"] = run_action(lambda: generate_lesson_quiz(clients, lesson, model))
    for i, question in enumerate(st.session_state.get("quiz") or []):
        answer = st.radio(question.question, question.options, index=None, key=f"quiz_{i}")
        if answer is not None:
            if question.options.index(answer) == question.correct_answer_index:
                st.success("Correct!")
            else:
                st.warning(f"The answer is: {question.options[question.correct_answer_index]}")

    st.divider()
    st.markdown("### Daily Reflection")
    entry = st.text_input("One word, a sentence, or nothing at all", key="reflection_entry")
    if st.button("Reflect"):
        with st.spinner("Reflecting..."):
            reflection = run_action(lambda: daily_reflection(clients, entry, model))
        if reflection:
            st.info(reflection)
