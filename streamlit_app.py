#!/usr/bin/env python3
"""
Streamlit TCG Deck Analyzer - Web App Version
"""

import random

import streamlit as st
import pandas as pd
import plotly.express as px
from pydantic import ValidationError

from analyzer import DeckAnalyzer, pick_fun_fact, report_to_dict
from config import load_settings
from deck_parser import EXAMPLE_DECKLIST, DeckParser, resolve_deck
from format_checker import DEFAULT_FORMAT, FORMAT_RULES
from logger_config import analyzer_logger, log_analysis, setup_logging
from models import Deck
from pokemon_tcg_api import PokemonTCGAPI
from utils import format_percent

SEVERITY_COLORS = {
    'critical': '#D3202A',
    'high': '#F28C28',
    'medium': '#E9C46A',
    'low': '#667eea',
    'info': '#2A9D8F',
}

CHART_LAYOUT = dict(
    paper_bgcolor='rgba(0,0,0,0)',
    plot_bgcolor='rgba(0,0,0,0)',
    font=dict(color='white', size=12),
)

# Page configuration
st.set_page_config(
    page_title="🃏 TCG Deck Analyzer",
    page_icon="🃏",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# Custom CSS for modern, clean design
st.markdown("""
<style>
    /* Main container styling */
    .main {
        background: linear-gradient(135deg, #0f0f1e 0%, #1a1a2e 50%, #0f0f1e 100%);
    }

    /* Metric cards */
    [data-testid="stMetricValue"] {
        font-size: 2rem;
        font-weight: 700;
        color: #a8b4ff;
    }

    /* Buttons */
    .stButton > button {
        border-radius: 10px;
        font-weight: 600;
        border: 1px solid rgba(102, 126, 234, 0.4);
    }

    hr {
        border: none;
        height: 1px;
        background: linear-gradient(90deg, transparent, rgba(102, 126, 234, 0.5), transparent);
        margin: 1rem 0 1.5rem 0;
    }
</style>
""", unsafe_allow_html=True)

settings = load_settings()
setup_logging(settings.log_level)

# Initialize session state
if 'current_page' not in st.session_state:
    st.session_state.current_page = 'landing'
if 'deck_data' not in st.session_state:
    st.session_state.deck_data = None
if 'deck_json' not in st.session_state:
    st.session_state.deck_json = None
if 'analysis_results' not in st.session_state:
    st.session_state.analysis_results = None


# Navigation callback functions
def go_to_analysis():
    st.session_state.current_page = 'analysis'


def go_to_landing():
    st.session_state.current_page = 'landing'
    st.session_state.deck_data = None
    st.session_state.deck_json = None
    st.session_state.analysis_results = None


@st.cache_resource
def get_api():
    return PokemonTCGAPI(settings)


def build_deck(decklist_text, deck_json, deck_name):
    """Build a Deck from pasted text or an uploaded JSON file."""
    if deck_json is not None:
        deck = Deck.from_json(deck_json, name=deck_name)
        return deck, []
    decklist = DeckParser().parse_text(decklist_text, name=deck_name)
    return resolve_deck(decklist, get_api())


def bar_percent(probability):
    return f"{'█' * int(probability * 20)} {format_percent(probability)}"


# Page routing
if st.session_state.current_page == 'landing':
    # ===== LANDING PAGE =====

    st.markdown("""
    <div style="
        text-align: center;
        padding: 3rem 2rem;
        background: linear-gradient(135deg, rgba(102, 126, 234, 0.15) 0%, rgba(118, 75, 162, 0.15) 100%);
        border-radius: 20px;
        margin-bottom: 2rem;
        border: 1px solid rgba(102, 126, 234, 0.2);
    ">
        <h1 style="font-size: 3rem; margin-bottom: 1rem; color: #a8b4ff; font-weight: 800;">🃏 TCG Deck Analyzer</h1>
        <p style="font-size: 1.2rem; color: rgba(255, 255, 255, 0.8); font-weight: 300;">
            Score your Pokémon TCG deck, check its evolution lines and see your opening-hand odds
        </p>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("## 🚀 Quick Start")

    col1, col2 = st.columns([3, 2])

    with col1:
        st.markdown("### 📝 Paste Your Decklist")

        deck_name_input = st.text_input(
            "Deck Name (Optional)",
            placeholder="e.g., Charizard ex",
            help="Give your deck a name, or leave blank"
        )

        if st.button("📋 Use Example Deck", type="secondary"):
            st.session_state.example_text = EXAMPLE_DECKLIST
            st.rerun()

        decklist_text = st.text_area(
            "Decklist",
            value=st.session_state.get('example_text', ''),
            height=260,
            placeholder=EXAMPLE_DECKLIST,
            help="Supports PTCGL exports ('4 Charizard ex OBF 125') and plain '4 Card Name' lines",
            label_visibility="collapsed"
        )

        uploaded_file = st.file_uploader(
            "📁 Upload a .txt decklist or .json deck",
            type=['txt', 'json'],
            help="JSON decks skip the card-data lookup"
        )

        deck_json = None
        if uploaded_file is not None:
            content = uploaded_file.read().decode('utf-8')
            if uploaded_file.name.lower().endswith('.json'):
                deck_json = content
            else:
                decklist_text = content
            st.success(f"✅ Loaded deck from: {uploaded_file.name}")

        ready = bool(decklist_text.strip()) or deck_json is not None
        if st.button("🔍 Analyze Deck", type="primary", disabled=not ready, use_container_width=True):
            st.session_state.deck_data = decklist_text
            st.session_state.deck_json = deck_json
            st.session_state.deck_name_custom = deck_name_input.strip() or None
            go_to_analysis()
            st.rerun()

    with col2:
        st.markdown("### ✨ What you get")
        st.markdown("""
        - **Deck score** from 0 to 100 with a tiered breakdown
        - **Warnings** on legality, consistency, power, speed and matchups
        - **Evolution lines** with bottlenecks and Stage 2 odds
        - **Draw odds**: mulligan rate, dead hands and setup by turn
        """)
        st.markdown("### 🎯 Supported Formats")
        st.markdown(", ".join(f"**{name.title()}**" for name in sorted(FORMAT_RULES)))

elif st.session_state.current_page == 'analysis':
    # ===== ANALYSIS PAGE =====

    col_nav, col_title = st.columns([1, 5])
    with col_nav:
        if st.button("🏠 Home", help="Return to landing page"):
            go_to_landing()
            st.rerun()

    with col_title:
        st.title("🔍 Deck Analysis Dashboard")

    decklist_content = st.session_state.deck_data
    deck_json = st.session_state.deck_json

    if not decklist_content and deck_json is None:
        st.error("No deck data found. Please return to the landing page.")
        if st.button("🏠 Go to Landing Page"):
            go_to_landing()
            st.rerun()
        st.stop()

    # Sidebar options (only on analysis page)
    st.sidebar.header("⚙️ Analysis Options")
    formats = sorted(FORMAT_RULES)
    selected_format = st.sidebar.selectbox(
        "Format:",
        formats,
        index=formats.index(DEFAULT_FORMAT),
        help="Legality rules to check the deck against"
    )
    show_raw = st.sidebar.checkbox("Show raw report JSON", value=False)

    with st.spinner("🔍 Analyzing your deck..."):
        try:
            deck, missing = build_deck(decklist_content, deck_json, st.session_state.get('deck_name_custom'))
            result = DeckAnalyzer(selected_format).run(deck)
        except (ValidationError, ValueError) as e:
            st.error(f"Error reading deck: {e}")
            st.stop()

    report = result.report
    log_analysis(analyzer_logger, report, missing_cards=missing,
                 check_failures=[f.check for f in result.failures], source="dashboard")
    st.session_state.analysis_results = report_to_dict(report)

    display_name = report.deck_name or "Your Deck"
    st.markdown(f"## 🃏 {display_name}")

    if missing:
        st.warning(f"Could not find card data for {len(missing)} cards: {', '.join(missing)}")
    if result.failures:
        st.warning(f"{len(result.failures)} checks could not run and were skipped.")

    # ===== HEADLINE =====
    st.markdown("### 🏆 Overview")
    st.markdown("<hr/>", unsafe_allow_html=True)
    col1, col2, col3, col4 = st.columns(4)
    probs = report.probabilities
    with col1:
        st.metric("Score", f"{report.score}/100", report.summary.label, delta_color="off")
    with col2:
        st.metric("Cards", report.total_cards, "Legal" if report.summary.legal else "Not legal", delta_color="off")
    with col3:
        st.metric("Mulligan Rate", format_percent(probs.mulligan_rate))
    with col4:
        st.metric("Dead Opening Hand", format_percent(probs.dead_draw_rate))

    # ===== SETUP ODDS & SEVERITY =====
    st.markdown("<br/>", unsafe_allow_html=True)
    st.markdown("### 🎲 Setup Odds & Warning Severity")
    st.markdown("<hr/>", unsafe_allow_html=True)
    col_left, col_right = st.columns(2)

    with col_left:
        setup_df = pd.DataFrame(
            [{"Turn": f"Turn {turn}", "Probability": probability * 100}
             for turn, probability in probs.setup_by_turn]
        )
        fig_setup = px.bar(
            setup_df,
            x="Turn",
            y="Probability",
            title="Chance to Be Set Up",
            labels={'Probability': 'Probability (%)'},
            range_y=[0, 100],
        )
        fig_setup.update_layout(showlegend=False, **CHART_LAYOUT)
        fig_setup.update_traces(
            hovertemplate='%{x}<br>%{y:.1f}%<extra></extra>',
            marker=dict(color='#667eea', line=dict(color='#764ba2', width=1))
        )
        st.plotly_chart(fig_setup, use_container_width=True)

    with col_right:
        severity_counts = {k: v for k, v in report.summary.severity_counts if v}
        if severity_counts:
            fig_severity = px.pie(
                values=list(severity_counts.values()),
                names=[f"{name.title()} ({count})" for name, count in severity_counts.items()],
                title="Warnings by Severity",
                color_discrete_sequence=[SEVERITY_COLORS[name] for name in severity_counts],
            )
            fig_severity.update_traces(textposition='inside', textinfo='percent+label')
            fig_severity.update_layout(**CHART_LAYOUT)
            st.plotly_chart(fig_severity, use_container_width=True)
        else:
            st.info("No warnings - deck looks clean!")

    # ===== EVOLUTION LINES =====
    evolving = [line for line in report.evolution_lines if line.is_evolution]
    st.markdown("<br/>", unsafe_allow_html=True)
    st.markdown("### 🧬 Evolution Lines")
    st.markdown("<hr/>", unsafe_allow_html=True)
    if evolving:
        lines_df = pd.DataFrame([
            {
                "Line": line.name,
                "Structure": line.structure,
                "Evolutions": ", ".join(line.stage1_names + line.stage2_names),
                "Type": line.line_type.value,
                "Bottleneck": line.bottleneck.value + (" (covered)" if line.bottleneck_suppressed else ""),
                "Stage 1 by T2": bar_percent(line.consistency.turn_two_stage1),
                "Stage 2 by T3": (bar_percent(line.consistency.turn_three_stage2)
                                  if line.stage2 is not None else "-"),
            }
            for line in evolving
        ])
        st.dataframe(lines_df, use_container_width=True, hide_index=True)
    else:
        st.info("No evolution lines - all Basic creatures")

    # ===== WARNINGS =====
    st.markdown("<br/>", unsafe_allow_html=True)
    st.markdown(f"### 📋 Warnings ({len(report.warnings)})")
    st.markdown("<hr/>", unsafe_allow_html=True)
    if report.warnings:
        warnings_df = pd.DataFrame([
            {
                "Severity": w.severity.value,
                "Category": w.category.value,
                "Title": w.title,
                "Win-rate impact": w.estimated_impact.win_rate,
            }
            for w in report.warnings
        ])
        st.dataframe(warnings_df, use_container_width=True, hide_index=True)

        for w in report.warnings:
            with st.expander(f"{w.severity.value.upper()} - {w.title}"):
                st.write(w.description)
                for suggestion in w.suggestions:
                    st.markdown(f"- 💡 {suggestion}")
                if w.cards:
                    st.caption("Cards: " + ", ".join(w.cards))

    st.caption(f"Estimated win-rate impact: {report.summary.estimated_win_rate_impact:.1f}%")
    st.info(pick_fun_fact(random.Random()))

    if show_raw:
        st.json(st.session_state.analysis_results)
