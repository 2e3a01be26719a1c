import logging
import os

import streamlit as st

from core.compare_engine import compare_options
from core.errors import ComparisonInFlightError, RefereeError
from core.parameter_synthesizer import synthesize_parameters
from core.preference_state import PreferenceState
from core.schemas import DECISION_CATEGORIES, UserPreferences
from core.tradeoff_matrix import TRADE_OFF_METRICS, metric_rows, scores_frame

# ------------- CONFIG -------------
st.set_page_config(
    page_title="The Referee – Decision Analysis",
    page_icon="⚖️",
    layout="wide",
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Streamlit secrets take over when no environment variable is set
try:
    for key in ("OPENROUTER_API_KEY", "REFEREE_SETUP_MODEL", "REFEREE_COMPARE_MODEL"):
        if key in st.secrets and not os.getenv(key):
            os.environ[key] = st.secrets[key]
except FileNotFoundError:
    pass

LOADING_TEXT = "Reviewing the Play… The Referee is analyzing your constraints and comparing options."

# ------------- SESSION -------------
def init_session():
    defaults = {
        "stage": "landing",
        "setup": None,
        "state": None,
        "result": None,
        "stale": False,
        "error": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def reset_session():
    for key in ("stage", "setup", "state", "result", "stale", "error"):
        st.session_state.pop(key, None)
    init_session()


def on_start():
    st.session_state.stage = "setup"


# ------------- PARAMETER CONTROLS -------------
def parameter_input(param, key_prefix):
    """Render one widget for a parameter and return the value it shows."""
    key = f"{key_prefix}_{param.id}"
    if param.kind == "slider" and param.is_fixed:
        # st.slider rejects an empty range
        st.metric(param.label, f"{param.value:g} {param.unit or ''}".strip(), help=param.reason or None)
        return param.value
    if param.kind == "slider":
        return st.slider(
            f"{param.label} ({param.unit})" if param.unit else param.label,
            min_value=float(param.min),
            max_value=float(param.max),
            value=float(param.value),
            help=param.reason or None,
            key=key,
        )
    if param.kind == "toggle":
        return st.checkbox(param.label, value=param.value, help=param.reason or None, key=key)
    if param.options:
        return st.selectbox(
            param.label,
            param.options,
            index=param.options.index(param.value),
            help=param.reason or None,
            key=key,
        )
    return st.text_input(param.label, value=param.value, help=param.reason or None, key=key)


def sync_controls(state, key_prefix, columns=4):
    cols = st.columns(columns)
    for i, param in enumerate(state.working.dynamic_params):
        with cols[i % columns]:
            value = parameter_input(param, key_prefix)
        if value != param.value:
            state.set_param(param.id, value)


# ------------- PAGES -------------
def landing_page():
    st.title("⚖️ The Referee")
    st.markdown(
        "#### Stop guessing. Compare options, understand trade-offs, and decide with confidence."
    )

    steps = [
        ("Define", "Tell us your problem, constraints, and priorities."),
        ("Analyze", "AI objectively breaks down viable paths."),
        ("Decide", "See pros, cons, and risks side-by-side."),
    ]
    for col, (idx, (title, desc)) in zip(st.columns(3), enumerate(steps, start=1)):
        with col:
            st.subheader(f"{idx}. {title}")
            st.caption(desc)

    st.button("Start Analysis →", type="primary", on_click=on_start)


def setup_page():
    st.title("Define your dilemma")

    category = st.selectbox("Category", DECISION_CATEGORIES)
    problem = st.text_area(
        "What decision are you facing?",
        height=120,
        placeholder="e.g. Should we migrate our monolith to microservices this year?",
    )

    if st.button("Suggest parameters", disabled=not problem.strip()):
        with st.spinner(LOADING_TEXT):
            setup = synthesize_parameters(category, problem.strip())
        st.session_state.setup = setup
        st.session_state.state = PreferenceState(
            UserPreferences(
                problem_statement=problem.strip(),
                category=category,
                dynamic_params=setup.parameters,
                priorities=setup.suggested_priorities[:2],
            )
        )

    setup = st.session_state.setup
    state = st.session_state.state
    if setup is None or state is None:
        return

    st.divider()
    st.subheader("Constraints")
    for param in state.working.dynamic_params:
        if param.reason:
            st.caption(f"**{param.label}** – {param.reason}")
    sync_controls(state, "setup", columns=2)

    priorities = st.multiselect(
        "Priorities",
        setup.suggested_priorities,
        default=[p for p in state.working.priorities if p in setup.suggested_priorities],
    )
    if priorities != state.working.priorities:
        state.set_priorities(priorities)

    if st.button("Run comparison", type="primary"):
        # the first comparison commits the setup choices as the baseline
        state = PreferenceState(state.working)
        try:
            with st.spinner(LOADING_TEXT):
                result = compare_options(state.committed)
        except RefereeError as e:
            st.error(f"The Referee could not complete the analysis: {e}")
            return
        st.session_state.state = state
        st.session_state.result = result
        st.session_state.stale = False
        st.session_state.stage = "dashboard"
        st.rerun()


def option_card(option):
    with st.container(border=True):
        st.subheader(option.name)
        st.write(option.overview)
        st.caption(f"**Cost:** {option.cost_level or 'n/a'} · **Level:** {option.complexity or 'n/a'}")

        st.markdown("**🟢 Key Advantages**")
        for p in option.pros:
            st.markdown(f"- {p}")
        st.markdown("**🔴 Main Trade-offs**")
        for c in option.cons:
            st.markdown(f"- {c}")
        if option.risks:
            st.markdown("**⚠️ Risks**")
            for r in option.risks:
                st.markdown(f"- {r}")

        st.markdown(f"**Best Fit For:** {option.best_for or 'n/a'}")


def tradeoff_panel(result):
    st.subheader("Trade-off Matrix")
    for metric in TRADE_OFF_METRICS:
        st.markdown(f"**{metric.upper()}**")
        for name, score in metric_rows(result, metric):
            st.progress(score, text=f"{name}: {score}%")

    with st.expander("Scores table"):
        st.dataframe(scores_frame(result), use_container_width=True)


def dashboard_page():
    state = st.session_state.state
    result = st.session_state.result

    head, reset = st.columns([5, 1])
    with head:
        st.title("Referee Judgment")
        st.caption(f"Scenario: {state.committed.problem_statement}")
    with reset:
        st.button("Start New Analysis", on_click=reset_session)

    with st.container(border=True):
        sync_controls(state, "sim")
        refresh = st.button(
            "Update Simulation",
            type="primary",
            disabled=not state.can_refresh,
        )

    if refresh:
        try:
            with st.spinner("Recalculating... " + LOADING_TEXT):
                st.session_state.result = state.refresh()
            st.session_state.stale = False
            st.session_state.error = None
        except ComparisonInFlightError:
            st.info("A comparison is already running.")
        except RefereeError as e:
            st.session_state.stale = True
            st.session_state.error = str(e)
        st.rerun()

    if st.session_state.error:
        st.error(f"The last update failed: {st.session_state.error}")
    if st.session_state.stale:
        st.warning("Showing the previous analysis; it does not reflect your latest changes.")

    main, side = st.columns([2, 1])
    with main:
        cols = st.columns(2)
        for i, option in enumerate(result.options):
            with cols[i % 2]:
                option_card(option)

        with st.container(border=True):
            st.subheader("Expert Summary")
            st.write(result.summary)
            st.success(f"**The Verdict:** {result.recommendation}")

    with side:
        tradeoff_panel(result)


# ------------- MAIN -------------
init_session()

if st.session_state.stage == "dashboard" and st.session_state.result is not None:
    dashboard_page()
elif st.session_state.stage == "setup":
    setup_page()
else:
    landing_page()
