"""Streamlit browser for the Pharmabook condition catalog."""
from __future__ import annotations

import streamlit as st

from pharmabook.config import SETTINGS
from pharmabook.errors import AuthError
from pharmabook.favorites.storage import JsonFileStorage
from pharmabook.favorites.store import KeyValueFavoritesStore
from pharmabook.gateway.auth import AuthClient, LoginForm, SignupForm, load_profile
from pharmabook.gateway.client import SupabaseGateway
from pharmabook.view.state import CatalogBrowser, DetailView

# Page config
st.set_page_config(
    page_title="Pharmabook",
    page_icon="💊",
    layout="wide",
)

TAB_LABELS = {
    "all": "⭕ All",
    "favorites": "📌 Favorites",
    "most-consulted": "📊 Most consulted",
    "coming-soon": "⭐ Coming soon",
}

DETAIL_SECTIONS = [
    ("causes", "Causes"),
    ("objectives", "Treatment objectives"),
    ("symptoms", "Symptoms"),
    ("alert_signs", "⚠️ Alert signs"),
    ("referral_criteria", "Referral criteria"),
    ("non_pharmacological", "Non-pharmacological measures"),
    ("general_guidance", "General guidance"),
]


def get_browser() -> CatalogBrowser:
    if "browser" not in st.session_state:
        browser = CatalogBrowser(
            SupabaseGateway(),
            KeyValueFavoritesStore(JsonFileStorage(SETTINGS.favorites_path)),
            require_session=SETTINGS.require_session,
        )
        st.session_state["browser"] = browser
    return st.session_state["browser"]


def render_auth(browser: CatalogBrowser) -> None:
    st.title("💊 PHARMABOOK")
    st.markdown("*Create your account for a workspace of your own prescriptions and indications.*")
    auth = AuthClient()
    signup_tab, login_tab = st.tabs(["Create account", "Sign in"])

    with signup_tab:
        with st.form("signup"):
            display_name = st.text_input("Full name", placeholder="e.g. Ana Paula")
            slug = st.text_input("Your slug (unique URL)", placeholder="e.g. ana-paula")
            email = st.text_input("Email", placeholder="you@email.com")
            password = st.text_input("Password", type="password")
            confirm = st.text_input("Confirm password", type="password")
            if st.form_submit_button("Create account"):
                form = SignupForm(email, password, display_name, confirm, slug)
                try:
                    result = auth.sign_up(form, gateway=SupabaseGateway())
                except AuthError as e:
                    st.error(e.message)
                else:
                    st.success(result.message)
                    if result.session is not None:
                        sign_in_browser(browser, result.session)

    with login_tab:
        with st.form("login"):
            email = st.text_input("Email", placeholder="you@email.com")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Sign in"):
                try:
                    session = auth.sign_in(LoginForm(email, password))
                except AuthError as e:
                    st.error(e.message)
                else:
                    sign_in_browser(browser, session)


def sign_in_browser(browser: CatalogBrowser, session) -> None:
    gateway = SupabaseGateway(access_token=session.access_token)
    browser.source = gateway
    browser.set_session(session)
    st.session_state["profile"] = load_profile(gateway, session.user)
    browser.reload()
    st.rerun()


def render_home(browser: CatalogBrowser) -> None:
    st.title("💊 PHARMABOOK")
    st.caption("Pharmaceutical prescription and indication")

    term = st.text_input("🔍 Search condition or symptom", value=browser.filters.search_term)
    if term != browser.filters.search_term:
        browser.set_search(term)

    st.header("Body systems")
    cols = st.columns(max(len(browser.catalog.systems), 1))
    for col, system in zip(cols, browser.catalog.systems):
        with col:
            selected = browser.filters.system_filter == system.id
            label = f"{system.icon or ''} {system.name}\n\n{system.count} conditions"
            if st.button(label, key=f"sys_{system.id}", type="primary" if selected else "secondary"):
                browser.select_system(system.id)
                st.rerun()

    tab_cols = st.columns(len(TAB_LABELS))
    for col, (tab, label) in zip(tab_cols, TAB_LABELS.items()):
        with col:
            if tab == "favorites":
                label = f"{label} ({browser.favorites_count()})"
            if st.button(label, key=f"tab_{tab}", type="primary" if browser.filters.tab == tab else "secondary"):
                browser.select_tab(tab)
                st.rerun()

    st.subheader(browser.list_title())
    empty = browser.empty_state()
    if empty is not None:
        st.info(f"{empty.icon} {empty.title}")
        return

    for condition in browser.visible_conditions():
        heart, body, arrow = st.columns([1, 10, 1])
        with heart:
            icon = "❤️" if browser.is_favorite(condition.id) else "🤍"
            if st.button(icon, key=f"fav_{condition.id}"):
                browser.toggle_favorite(condition.id)
                st.rerun()
        with body:
            st.markdown(f"**{condition.name}**  \n{condition.desc}")
        with arrow:
            if st.button("→", key=f"open_{condition.id}"):
                browser.open_condition(condition.id)
                st.rerun()


def render_detail(browser: CatalogBrowser) -> None:
    if st.button("← Back"):
        browser.go_home()
        st.rerun()

    detail = browser.current_detail()
    if detail is None:
        st.error("Condition not found")
        return

    st.caption(detail.system)
    st.title(detail.name)
    if detail.definition:
        st.markdown(detail.definition)

    for field, title in DETAIL_SECTIONS:
        items = getattr(detail, field)
        if items:
            st.markdown(f"### {title}")
            st.markdown("\n".join(f"- {item}" for item in items))

    if detail.medications:
        st.markdown("### 💊 Medications")
        for med in detail.medications:
            badge = " `MIP`" if med.mip else ""
            st.markdown(f"**{med.name or '-'}**{badge}")
            st.markdown(
                f"- Concentration: {med.concentration or '-'}\n"
                f"- Posology: {med.posology or '-'}\n"
                f"- Duration: {med.duration or '-'}"
            )


def main():
    browser = get_browser()

    if browser.require_session and browser.session is None:
        render_auth(browser)
        return

    if not browser.catalog.conditions and browser.notice is None and not st.session_state.get("loaded"):
        with st.spinner("Loading data..."):
            browser.reload()
        st.session_state["loaded"] = True

    if browser.notice is not None:
        getattr(st, browser.notice.level)(browser.notice.message)
        if st.button("Dismiss"):
            browser.dismiss_notice()
            st.rerun()

    with st.sidebar:
        profile = st.session_state.get("profile")
        st.markdown(f"👋 Hello, **{profile.display_name if profile else 'Professional'}**")
        if browser.session is not None and st.button("🚪 Sign out"):
            try:
                AuthClient().sign_out(browser.session)
            except AuthError as e:
                st.warning(e.message)
            browser.set_session(None)
            st.session_state.pop("profile", None)
            st.rerun()

    if isinstance(browser.view, DetailView):
        render_detail(browser)
    else:
        render_home(browser)


if __name__ == "__main__":
    main()
