from typing import Dict

import pandas as pd
import plotly.express as px
import streamlit as st

from animation.clip import AnimationClip

EVENT_COLORS = {
    "TrailOn": "#00b894",
    "OnAttackTrigger": "#ff4b4b",
    "TrailOff": "#0984e3",
}


def build_timeline_frame(clips: Dict[str, AnimationClip]) -> pd.DataFrame:
    """每个片段的事件展开成一行一个事件"""
    rows = []
    for name, clip in clips.items():
        for evt in clip.sorted_events():
            rows.append({
                "片段": name,
                "事件": evt.function_name,
                "时间(s)": round(evt.time, 3),
                "比例": round(evt.time / clip.length, 3) if clip.length > 0 else 0.0,
                "序号": evt.int_parameter,
            })
    return pd.DataFrame(rows, columns=["片段", "事件", "时间(s)", "比例", "序号"])


def render_clip_timeline(engine):
    st.header("🎞️ 动画事件预览")

    clip_length = st.slider("预览片段长度 (秒)", 0.5, 4.0, 1.5, 0.1)

    if st.button("重新合成", type="primary"):
        # 用统一长度重建外部片段（已登记的片段保持原长度）
        for category in engine.mapper.categories():
            for clip_name in engine.mapper.table().forward[category].values():
                if clip_name not in engine.external_clips:
                    engine.register_external_clip(AnimationClip(clip_name, clip_length), synthesize_now=False)
        engine.synthesize_external_clips()

    df = build_timeline_frame(engine.external_clips)
    if df.empty:
        st.info("还没有外部片段，点击“重新合成”")
        return

    fig = px.scatter(df, x="时间(s)", y="片段", color="事件", symbol="事件",
                     color_discrete_map=EVENT_COLORS, hover_data=["比例", "序号"])
    fig.update_traces(marker=dict(size=12))
    fig.update_layout(height=max(300, 28 * df["片段"].nunique()))
    st.plotly_chart(fig, use_container_width=True)

    with st.expander("事件明细"):
        st.dataframe(df, use_container_width=True, hide_index=True)
