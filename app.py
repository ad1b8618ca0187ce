"""
Natatro Simulator Web App
Streamlit interface for running seeded simulations.
"""

import pandas as pd
import streamlit as st

from natatro.engine.blinds import BlindType
from natatro.simulator import Simulator

# Page config
st.set_page_config(
    page_title="Natatro Simulator",
    page_icon="🃏",
    layout="wide"
)

st.title("🃏 Natatro Simulator")
st.markdown("*Seeded auto-play runs of the Natatro rules engine*")


# Initialize simulator (cached)
@st.cache_resource
def get_simulator(max_ante: int):
    return Simulator(max_ante=max_ante)


# Sidebar for settings
st.sidebar.header("Settings")

max_ante = st.sidebar.number_input("Victory Ante", min_value=1, max_value=16, value=8)
sim = get_simulator(int(max_ante))

strategy = st.sidebar.selectbox("Strategy", options=sim.get_available_strategies(),
                                index=sim.get_available_strategies().index("greedy"))
seed = st.sidebar.number_input("Seed", min_value=0, value=42, step=1)

run_mode = st.sidebar.radio("Mode", ["Single Run", "Batch Runs"])

if run_mode == "Batch Runs":
    num_runs = st.sidebar.slider("Number of Runs", min_value=10, max_value=500, value=100, step=10)

st.divider()

if st.button("🎲 Run Simulation", type="primary", use_container_width=True):

    if run_mode == "Single Run":
        with st.spinner("Running simulation..."):
            result = sim.run(seed=int(seed), strategy=strategy)

        if result.victory:
            st.success("🏆 VICTORY!")
        else:
            st.error("💀 DEFEAT")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Ante Reached", result.ante_reached)
        with col2:
            st.metric("Blinds Beaten", result.blinds_beaten)
        with col3:
            st.metric("Final Money", f"${result.final_money}")
        with col4:
            bosses_beat = sum(1 for b in result.blind_history
                              if b.blind_type == BlindType.BOSS.value and b.success)
            st.metric("Bosses Defeated", bosses_beat)

        st.subheader("📜 Run Timeline")

        hands_by_blind = {}
        blind_no = 0
        for event in result.history.events:
            if event.event_type == "hand_played":
                hands_by_blind.setdefault(blind_no, []).append(
                    (event.data["hand_type"], event.data["score"]))
            elif event.event_type == "blind_result":
                blind_no += 1

        for i, blind in enumerate(result.blind_history):
            icon = "✅" if blind.success else "❌"
            margin_str = f"+{blind.margin_pct:.0f}%" if blind.margin_pct > 0 else f"{blind.margin_pct:.0f}%"
            label = f"**{blind.blind_name}**" if blind.blind_type == BlindType.BOSS.value else blind.blind_name

            with st.expander(f"{icon} Ante {blind.ante} - {label} ({blind.score:,} / {blind.required:,}) {margin_str}"):
                col1, col2 = st.columns(2)
                with col1:
                    st.write(f"**Score:** {blind.score:,}")
                    st.write(f"**Required:** {blind.required:,}")
                with col2:
                    st.write(f"**Hands Used:** {blind.hands_used}")
                    st.write(f"**Discards Used:** {blind.discards_used}")

                if hands_by_blind.get(i):
                    st.markdown("**Hands Played:**")
                    for hand_type, score in hands_by_blind[i]:
                        score_bar = "█" * min(20, max(1, score // 500))
                        st.code(f"{hand_type:20} {score:>8,} {score_bar}")

        st.divider()

        col1, col2, col3 = st.columns(3)

        with col1:
            st.subheader("🃏 Jokers")
            if result.jokers_collected:
                for joker in result.jokers_collected:
                    st.markdown(f"- {joker}")
            else:
                st.markdown("*None collected*")

        with col2:
            st.subheader("🎫 Vouchers")
            if result.vouchers_acquired:
                for voucher in result.vouchers_acquired:
                    st.markdown(f"- {voucher}")
            else:
                st.markdown("*None acquired*")

        with col3:
            st.subheader("📈 Hand Levels")
            leveled = {k: v for k, v in result.hand_levels.items() if v > 1}
            if leveled:
                for hand, level in sorted(leveled.items(), key=lambda x: -x[1]):
                    bar = "▓" * (level - 1)
                    st.markdown(f"**{hand}:** Lv.{level} {bar}")
            else:
                st.markdown("*No upgrades*")

    else:  # Batch mode
        with st.spinner(f"Running {num_runs} simulations..."):
            result = sim.run_batch(runs=num_runs, seed=int(seed), strategy=strategy)

        st.subheader(f"Results ({num_runs} runs)")

        if result.win_rate > 50:
            st.success(f"🏆 Win Rate: {result.wins}/{result.runs} ({result.win_rate:.1f}%)")
        elif result.win_rate > 0:
            st.warning(f"Win Rate: {result.wins}/{result.runs} ({result.win_rate:.1f}%)")
        else:
            st.error(f"Win Rate: {result.wins}/{result.runs} ({result.win_rate:.1f}%)")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Avg Blinds", f"{result.avg_blinds:.1f}")
        with col2:
            st.metric("Avg Ante", f"{result.avg_ante:.1f}")
        with col3:
            st.metric("Max Ante", result.max_ante)
        with col4:
            st.metric("Avg Money", f"${result.avg_money:.0f}")

        col1, col2 = st.columns(2)
        with col1:
            st.metric("Avg Jokers", f"{result.avg_jokers:.1f}")
        with col2:
            st.metric("Avg Planets", f"{result.avg_planets:.1f}")

        st.subheader("Ante Distribution")

        chart_data = pd.DataFrame({
            'Ante': list(result.ante_distribution.keys()),
            'Runs': list(result.ante_distribution.values())
        }).sort_values('Ante')

        st.bar_chart(chart_data.set_index('Ante'))

# Footer
st.divider()
st.markdown("*Built with the Natatro engine*")
