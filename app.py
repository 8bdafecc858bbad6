import os
import sys

import pandas as pd
import streamlit as st

# ==========================================
# 0. 路径与导入配置
# ==========================================
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from core.config_manager import get_config
from simulation.engine import ExtraAttackEngine
from simulation.event_system import EventType
from simulation.host_bridge import HostBridge
from ui.clip_timeline import render_clip_timeline
from ui.key_probe import render_key_probe


class InspectorHost(HostBridge):
    """检查器没有真正的宿主，只记录清除请求"""

    def __init__(self):
        self.cleared = []

    def current_playback_state(self, actor_id):
        return None

    def clear_carried_attack_state(self, actor_id):
        self.cleared.append(actor_id)


def load_engine(config_dir: str) -> ExtraAttackEngine:
    config = get_config()
    config.config_dir = config_dir
    engine = ExtraAttackEngine(InspectorHost())
    engine.initialize()
    return engine


def build_store_frame(engine: ExtraAttackEngine) -> pd.DataFrame:
    snapshot = engine.store.snapshot()
    rows = []
    for key in sorted(snapshot.records):
        record = snapshot.records[key]
        rows.append({
            "键": key,
            "hit": record.hit_timing,
            "trailOn": record.trail_on_timing,
            "trailOff": record.trail_off_timing,
            "speed": record.speed_multiplier,
            "range": record.attack_range,
            "angle": record.attack_angle,
            "VFX": record.enable_vfx,
        })
    return pd.DataFrame(rows)


# ==========================================
# 1. 界面配置
# ==========================================
st.set_page_config(page_title="额外攻击配置检查器", layout="wide")

st.sidebar.title("⚙️ 配置")
config_dir = st.sidebar.text_input("配置目录", value=get_config().config_dir)

if st.sidebar.button("📥 加载 / 重新加载", type="primary") or "engine" not in st.session_state:
    st.session_state["engine"] = load_engine(config_dir)

engine = st.session_state["engine"]

reloads = engine.event_bus.get_event_history(EventType.CONFIG_RELOADED, limit=1)
if reloads and not reloads[0].get("success"):
    st.sidebar.error("部分配置加载失败，正在使用旧数据（详见日志）")

st.sidebar.metric("时机记录", len(engine.store))
st.sidebar.metric("武器类型", len(engine.mapper.categories()))

st.title("🗡️ 额外攻击配置检查器")

tab_store, tab_probe, tab_timeline = st.tabs(["📋 时机配置", "🔑 键解析", "🎞️ 事件预览"])

with tab_store:
    df = build_store_frame(engine)
    if df.empty:
        st.info("时机配置为空")
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)
        disabled = df[(df["range"] <= 0) | (df["angle"] <= 0)]
        if not disabled.empty:
            st.caption(f"关闭伤害的键: {', '.join(disabled['键'])}")

with tab_probe:
    render_key_probe(engine)

with tab_timeline:
    render_clip_timeline(engine)
