import pandas as pd
import streamlit as st

from core.enums import AttackMode
from core.timing_store import TimingRecordStore
from mechanics.key_resolver import KeyResolver, build_candidates

MODE_LABELS = {
    "普通 (左键)": AttackMode.NONE,
    "Q": AttackMode.VARIANT_Q,
    "T": AttackMode.VARIANT_T,
    "G": AttackMode.VARIANT_G,
}


def build_probe_frame(store: TimingRecordStore, clip_name: str, mode: AttackMode,
                      hit_index: int) -> pd.DataFrame:
    """列出全部候选键、是否存在以及最终命中的键"""
    resolved = KeyResolver(store).resolve(clip_name, mode, hit_index)
    rows = []
    for priority, key in enumerate(build_candidates(clip_name, mode, hit_index), start=1):
        rows.append({
            "优先级": priority,
            "候选键": key,
            "已配置": store.has(key),
            "选中": key == resolved,
        })
    return pd.DataFrame(rows)


def render_key_probe(engine):
    st.header("🔑 配置键解析")

    c1, c2, c3 = st.columns([3, 1, 1])
    clip_name = c1.text_input("片段名", value="sword_secondary")
    mode_label = c2.selectbox("模式", list(MODE_LABELS.keys()), index=1)
    hit_index = c3.number_input("命中序号", 0, 10, 0)

    if not clip_name:
        st.warning("请输入片段名")
        return

    mode = MODE_LABELS[mode_label]
    df = build_probe_frame(engine.store, clip_name, mode, int(hit_index))
    st.dataframe(df, use_container_width=True, hide_index=True)

    selected = df[df["选中"]]
    if selected.empty:
        st.info(f"没有匹配的配置，使用默认记录 (键 = {clip_name})")
        record = engine.store.default
    else:
        key = selected.iloc[0]["候选键"]
        st.success(f"使用配置: {key}")
        record = engine.store.get(key)

    st.json(record.to_yaml_dict())
