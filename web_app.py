import streamlit as st
import json
import tempfile
from pathlib import Path

import pandas as pd

from qtype_ordering.core.attempt import QuestionAttempt, is_graded
from qtype_ordering.core.config import Preferences, load_config
from qtype_ordering.core.question import OrderingQuestion
from qtype_ordering.core.strings import get_string, set_language
from qtype_ordering.forms.edit_form import OrderingEditForm
from qtype_ordering.moodle_questions import MoodleQuiz
from qtype_ordering.output.renderer import OrderingRenderer
from qtype_ordering.services.batch_grading import grade_batch, read_responses

CFG = load_config()

# --- CẤU HÌNH TRANG ---
st.set_page_config(
    page_title="Ordering question",
    page_icon="🔢",
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- CSS (COMPACT) + style cho danh sách mục ---
st.markdown("""
<style>
    .block-container { padding-top: 1.5rem; padding-bottom: 1rem; }
    h1 { font-size: 1.8rem !important; margin-bottom: 0.5rem !important; }
    div.stButton > button:first-child {
        background-color: #0068c9; color: white; border-radius: 6px; font-weight: 600;
    }
    ol.sortablelist li { padding: 4px 8px; margin: 3px 0; border: 1px solid #ccc; border-radius: 4px; }
    ol.horizontal li { display: inline-block; margin-right: 6px; }
    li.correct { background: #dff0d8; }
    li.incorrect { background: #f2dede; }
    li.partial66 { background: #fcf8e3; }
    li.partial33 { background: #fbeed5; }
    li.partial00 { background: #f9e0c7; }
</style>
""", unsafe_allow_html=True)

# ================= SIDEBAR =================
with st.sidebar:
    st.header("⚙️ Cấu hình")
    lang = st.radio("Ngôn ngữ:", ["en", "vi"], horizontal=True,
                    index=0 if CFG["lang"] != "vi" else 1)
    set_language(lang)
    prefs = Preferences(CFG["preferences_file"])
    with st.expander("Mặc định đã lưu"):
        st.json(prefs.as_dict())
    st.caption(get_string("pluginnamesummary"))

st.title(f"🔢 {get_string('pluginname')}")

if "question" not in st.session_state:
    st.session_state["question"] = None
if "addanswers" not in st.session_state:
    st.session_state["addanswers"] = 0


def _render_field(f, data):
    """FormField -> widget; trả về giá trị nhập."""
    key = f"fld_{f.name}"
    value = data.get(f.name, f.default)
    if f.type == "header":
        st.subheader(f.label)
        return None
    if f.type == "select":
        keys = list(f.options.keys())
        idx = keys.index(value) if value in keys else 0
        return st.selectbox(f.label, keys, index=idx, format_func=lambda k: f.options[k], key=key)
    if f.type == "text":
        return st.text_input(f.label, value="" if value is None else str(value), key=key)
    if f.type == "editor":
        if isinstance(value, dict):
            value = value.get("text", "")
        height = 40 * int(f.attributes.get("rows", 2)) + 30
        return st.text_area(f.label, value=value or "", height=height, key=key)
    if f.type == "advcheckbox":
        return int(st.checkbox(f.label, value=bool(value), key=key))
    return None


def _indexed(name):
    # "answer[3]" -> ("answer", 3)
    if name.endswith("]") and "[" in name:
        base, idx = name[:-1].split("[", 1)
        return base, int(idx)
    return name, None


# ================= TABS =================
tab_edit, tab_attempt, tab_xml, tab_batch = st.tabs(
    ["✏️ Soạn câu hỏi", "▶️ Làm thử", "📄 Moodle XML", "📊 Chấm hàng loạt"]
)

# --- SOẠN CÂU HỎI ---
with tab_edit:
    question = st.session_state["question"]
    submitted = {"countanswers": len(question.answers) if question else None}
    if st.session_state["addanswers"]:
        submitted["addanswers"] = 1
        submitted["addanswerscount"] = st.session_state["addanswers"]

    form = OrderingEditForm(question, prefs, submitted, defaultanswerformat=int(CFG["defaultanswerformat"]))
    fields = form.definition()
    initial = form.data_preprocessing(question)

    values = {}
    for f in fields:
        if f.hide_if:
            other, _, v = f.hide_if
            if values.get(other) == v:
                continue
        if f.type in ("submit", "group"):
            continue
        base, idx = _indexed(f.name)
        if idx is not None:
            seq = initial.get(base) or []
            data = {f.name: seq[idx] if idx < len(seq) else None}
        else:
            data = initial
        values[f.name] = _render_field(f, data)

    c_add, c_save = st.columns(2)
    n_add = c_add.selectbox(get_string("add"), list(form.get_addcount_options("answer").keys()),
                            format_func=lambda k: form.get_addcount_options("answer")[k])
    if c_add.button(get_string("add")):
        st.session_state["addanswers"] += n_add
        st.rerun()

    if c_save.button("💾 Lưu câu hỏi", type="primary", use_container_width=True):
        data = {"id": question.id if question else None}
        for name, v in values.items():
            base, idx = _indexed(name)
            if idx is None:
                data[name] = v
            else:
                data.setdefault(base, []).append(v)
        errors = form.validation(data)
        if errors:
            for field, msg in errors.items():
                st.error(f"{field}: {msg}", icon="⚠️")
        else:
            st.session_state["question"] = form.save_question(data)
            st.session_state["addanswers"] = 0
            st.session_state.pop("qa", None)
            st.success("Đã lưu.")

# --- LÀM THỬ ---
with tab_attempt:
    question = st.session_state["question"]
    if question is None:
        st.info("👈 Soạn và lưu câu hỏi trước.")
    else:
        if st.button("🔀 Bắt đầu lượt mới") or "qa" not in st.session_state:
            qa = QuestionAttempt(question, usage_id=1, slot=1)
            qa.start()
            st.session_state["qa"] = qa
        qa = st.session_state["qa"]
        question.apply_attempt_state(qa.get_step(0))
        question.update_current_response(qa.get_last_qt_data())

        # vị trí của từng mục (1..n); sắp theo vị trí khi nộp
        st.markdown(question.format_questiontext(qa), unsafe_allow_html=True)
        positions = {}
        for pos, answerid in enumerate(question.currentresponse, 1):
            positions[answerid] = st.number_input(
                question.answers[answerid].answer, min_value=1, max_value=len(question.currentresponse),
                value=pos, key=f"pos_{answerid}",
            )
        if st.button("✅ Nộp bài", type="primary"):
            order = sorted(positions, key=lambda a: (positions[a], question.currentresponse.index(a)))
            qa.finish(question.response_for_ids(order))

        if is_graded(qa.get_state()):
            out = OrderingRenderer().render(qa)
            st.markdown(out["formulation"], unsafe_allow_html=True)
            st.markdown(out["specificfeedback"], unsafe_allow_html=True)
            st.markdown(out["generalfeedback"], unsafe_allow_html=True)
            st.markdown(out["rightanswer"], unsafe_allow_html=True)
            st.metric("Fraction", f"{qa.get_fraction():.2f}")

# --- MOODLE XML ---
with tab_xml:
    c_exp, c_imp = st.columns(2)
    with c_exp:
        question = st.session_state["question"]
        if question is not None:
            cat = st.text_input("Category:", value=question.category_path or "")
            question.category_path = cat or None
            quiz = MoodleQuiz()
            quiz.add_question(question)
            st.download_button("📥 Tải moodle.xml", data=quiz.to_xml(), file_name="moodle.xml",
                               mime="application/xml", use_container_width=True)
    with c_imp:
        up_xml = st.file_uploader("Nhập Moodle XML:", type=["xml"])
        if up_xml:
            try:
                quiz = MoodleQuiz.from_xml(up_xml.getvalue())
            except ValueError as e:
                st.error(f"Lỗi: {e}")
            else:
                names = [q.name for q in quiz.questions]
                if names:
                    sel = st.selectbox("Câu hỏi:", range(len(names)), format_func=lambda i: names[i])
                    if st.button("Mở để soạn"):
                        st.session_state["question"] = quiz.questions[sel]
                        st.session_state.pop("qa", None)
                        st.rerun()
                else:
                    st.warning("Không có câu hỏi ordering nào.")

# --- CHẤM HÀNG LOẠT ---
with tab_batch:
    up_q = st.file_uploader("Questions JSON:", type=["json"])
    up_r = st.file_uploader("Responses (CSV / Excel):", type=["csv", "xlsx"])
    if up_q and up_r and st.button("🚀 Chấm", type="primary", use_container_width=True):
        try:
            items = json.loads(up_q.getvalue().decode("utf-8"))
            if isinstance(items, dict):
                items = items.get("questions", [items])
            questions = {}
            for item in items:
                q = OrderingQuestion.from_dict(item)
                questions[q.name] = q
                questions[str(q.id)] = q
            with tempfile.TemporaryDirectory() as temp_dir:
                rp = Path(temp_dir) / up_r.name
                rp.write_bytes(up_r.getvalue())
                responses = read_responses(str(rp))
            prog = st.progress(0)
            report = grade_batch(questions, responses,
                                 lambda c, t, m: prog.progress(min(int((c / t) * 100), 100)))
        except ValueError as e:
            st.error(f"Lỗi: {e}")
        else:
            st.dataframe(report, use_container_width=True)
            st.download_button("📥 Tải report.csv", data=report.to_csv(index=False),
                               file_name="report.csv", mime="text/csv")
            st.bar_chart(pd.Series(report["state"].value_counts(), name="rows"))
