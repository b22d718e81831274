# app.py
import json

import streamlit as st

from sql_localizer.config import load_settings
from sql_localizer.errors import LocalizerError
from sql_localizer.export import export_csv, export_docx, export_filename, export_sql
from sql_localizer.images import (
    PDF_TYPE,
    UPLOAD_EXTENSIONS,
    normalize_image,
    pdf_page_count,
    render_pdf_page,
)
from sql_localizer.logger import configure_logging, get_logger
from sql_localizer.services import MockClient, build_client
from sql_localizer.sql import (
    append_mapping_token,
    count_header_columns,
    count_mapping_columns,
    mapping_mismatch,
    mapping_tokens,
)
from sql_localizer.workbench import Workbench

# ─────────────────────────────────────────────────────────────
# PAGE CONFIG
# ─────────────────────────────────────────────────────────────
st.set_page_config(page_title="SQL Translator & Localizer", layout="wide")

# ─────────────────────────────────────────────────────────────
# ENV / CLIENT
# ─────────────────────────────────────────────────────────────
settings = load_settings()
configure_logging(settings.log_level)
log = get_logger("sql_localizer.app")


@st.cache_resource(show_spinner=False)
def get_client(_settings, cache_key: tuple):
    return build_client(_settings)


client = get_client(settings, (settings.backend, settings.api_key, settings.model, settings.mock_delay))

# ─────────────────────────────────────────────────────────────
# UI TEXT
# ─────────────────────────────────────────────────────────────
TEXTS = {
    "en": {
        "title_main": "SQL Translator & Localizer",
        "title_sub": "Auto key generation & localized SQL INSERT statements.",
        "settings": "Settings",
        "tab_sql": "SQL Structure",
        "tab_lang": "Languages",
        "mapping_help": "The **Mapping Order** defines the variables that populate the `VALUES()` list, "
                        "one per header column, in order.",
        "header_label": "1. SQL Insert Header",
        "mapping_label": "2. Variable Mapping Order",
        "columns_detected": "Columns detected: {n}",
        "mapped_values": "Mapped values: {n}",
        "mismatch": "Header declares {h} columns but the mapping has {m} values.",
        "add_variable": "Add variable to mapping",
        "add": "Add",
        "restore_defaults": "Restore defaults",
        "generation_target": "Generation target",
        "all": "All",
        "min": "Min",
        "extra_language": "Define extra language",
        "code": "Code",
        "label": "Label",
        "add_language": "+ Add custom column",
        "input_header": "Generate entry",
        "input_caption": "Describe the string or paste UI text. A screenshot works too.",
        "input_placeholder": "Entry description or text...",
        "upload_label": "Screenshot (JPG, PNG or PDF page)",
        "pdf_supported": "PDF detected. Pick a page.",
        "pages": "Page",
        "generate": "Generate",
        "spinner_generate": "Generating keys and translations...",
        "spinner_refine": "Refining {lang}...",
        "entries_header": "Entries ({n})",
        "no_entries": "Generated entries will appear here.",
        "clear_all": "Clear all",
        "clear_confirm": "Clear all generated entries?",
        "confirm": "Yes, clear",
        "delete": "Delete entry",
        "refine": "Refine",
        "sql_output": "SQL output",
        "view_mode": "View",
        "compact": "Compact",
        "annotated": "Annotated",
        "copy": "Copy SQL",
        "export_sql": "Download .sql",
        "export_csv": "Download .csv",
        "export_docx": "Download .docx",
        "mock_warning": "⚠️ **GEMINI_API_KEY** is not set; using the offline dictionary backend.",
        "backend_mock": "Backend: offline dictionary",
        "backend_gemini": "Backend: Gemini ({model})",
        "error_file_proc": "Error while processing the file:",
    },
}

# ─────────────────────────────────────────────────────────────
# STATE
# ─────────────────────────────────────────────────────────────
ss = st.session_state
ss.setdefault("app_lang_key", "en")
ss.setdefault("upload_nonce", 0)
ss.setdefault("pdf_page_index", 0)
if "workbench" not in ss:
    ss["workbench"] = Workbench(client)
wb: Workbench = ss["workbench"]
ss.setdefault("sql_header", wb.header)
ss.setdefault("sql_mapping", wb.mapping)

if ss.pop("reset_input", False):
    ss["input_text"] = ""
    ss["upload_nonce"] += 1

# ─────────────────────────────────────────────────────────────
# STYLE
# ─────────────────────────────────────────────────────────────
st.markdown("""
<style>
.stApp { background-color:#f8fafc; }
.stApp > header { visibility:hidden; }
div.block-container { max-width:100%; padding: 2rem; }
.center { text-align:center; }
.title-banner {
  background: linear-gradient(90deg,#4f46e5,#312e81);
  color:#fff;
  padding:12px 28px;
  border-radius:24px;
  font-weight:900;
  display:inline-block;
  font-size: 2.2rem;
  letter-spacing: .3px;
}
.stButton>button { border-radius:8px !important; }
.copy-btn { background:#eef2ff; border:1px solid #a5b4fc; padding:6px 10px; border-radius:8px; cursor:pointer; }
.lang-code { font-family:monospace; font-weight:700; color:#4f46e5; }
</style>
""", unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────────────────────
def ui_text(key, **kwargs):
    text = TEXTS[ss["app_lang_key"]][key]
    return text.format(**kwargs) if kwargs else text


def bind(key, value):
    if key not in ss:
        ss[key] = value


def components_copy_button(uid: str, text: str, label: str):
    import streamlit.components.v1 as components
    html = f"""
    <div>
      <button class="copy-btn" id="btn-{uid}">{label}</button>
      <span id="ok-{uid}" style="margin-left:6px;font-size:.85rem;color:#4f46e5;display:none;">✓</span>
    </div>
    <script>
      const btn = document.getElementById("btn-{uid}");
      const ok = document.getElementById("ok-{uid}");
      btn.onclick = async () => {{
        await navigator.clipboard.writeText({json.dumps(text or "")});
        ok.style.display = "inline";
        setTimeout(()=>{{ ok.style.display="none"; }}, 1200);
      }};
    </script>
    """
    components.html(html, height=36)


def sync_template():
    ss["sql_header"] = wb.header
    ss["sql_mapping"] = wb.mapping


def sync_language_checks():
    for code in wb.labels.codes():
        ss[f"gen_{code}"] = code in wb.gen_languages


# ─────────────────────────────────────────────────────────────
# CALLBACKS
# ─────────────────────────────────────────────────────────────
def on_header_change():
    wb.header = ss["sql_header"]


def on_mapping_change():
    wb.mapping = ss["sql_mapping"]


def on_add_token():
    token = ss.get("mapping_token")
    if token:
        wb.mapping = append_mapping_token(wb.mapping, token)
        sync_template()


def on_restore_defaults():
    wb.restore_defaults()
    sync_template()
    sync_language_checks()


def on_toggle_language(code):
    wb.toggle_language(code)


def on_select_all(enable):
    wb.select_all_languages(enable)
    sync_language_checks()


def on_add_language():
    code = wb.add_language(ss.get("new_lang_code", ""), ss.get("new_lang_label", ""))
    if code:
        sync_template()
        sync_language_checks()
        ss["new_lang_code"] = ""
        ss["new_lang_label"] = ""


def on_key_change(entry_id, name):
    widget = f"{name}_{entry_id}"
    ss[widget] = (ss[widget] or "").upper()
    wb.edit_key(entry_id, name, ss[widget])


def on_translation_change(entry_id, lang):
    wb.edit_translation(entry_id, lang, ss[f"tr_{entry_id}_{lang}"])


def on_refine(entry_id, lang):
    # Runs before the page body, so a failure message set here is rendered on this run.
    with st.spinner(ui_text("spinner_refine", lang=lang.upper())):
        if wb.refine(entry_id, lang):
            ss[f"tr_{entry_id}_{lang}"] = wb.store.get(entry_id).translations[lang]


def on_view_change():
    wb.annotated = ss["sql_view"] == ui_text("annotated")


@st.cache_data(show_spinner=False)
def render_pdf_page_thumb(pdf_bytes: bytes, page_index: int, scale: float = 1.2) -> bytes:
    return render_pdf_page(pdf_bytes, page_index, scale)


def prepare_upload(uploaded):
    """Uploaded file -> (bytes, mime) for the backend, or None."""
    if uploaded is None:
        return None
    data = uploaded.getvalue()
    if uploaded.type == PDF_TYPE:
        return render_pdf_page_thumb(data, ss["pdf_page_index"], 1.4), "image/png"
    return normalize_image(data, uploaded.type)


# ─────────────────────────────────────────────────────────────
# HEADER
# ─────────────────────────────────────────────────────────────
st.markdown('<div class="center"><span class="title-banner">'
            f'{ui_text("title_main")}'
            '</span></div>', unsafe_allow_html=True)
st.markdown(f'<p class="center" style="color:#475569">{ui_text("title_sub")}</p>', unsafe_allow_html=True)

if settings.backend == "gemini" and not settings.api_key:
    st.warning(ui_text("mock_warning"))
if isinstance(client, MockClient):
    st.caption(ui_text("backend_mock"))
else:
    st.caption(ui_text("backend_gemini", model=settings.model))

# ─────────────────────────────────────────────────────────────
# SETTINGS
# ─────────────────────────────────────────────────────────────
with st.expander(f"⚙️ {ui_text('settings')}", expanded=False):
    tab_sql, tab_lang = st.tabs([ui_text("tab_sql"), ui_text("tab_lang")])

    with tab_sql:
        st.info(ui_text("mapping_help"))
        st.markdown(f"**{ui_text('header_label')}**")
        st.caption(ui_text("columns_detected", n=count_header_columns(wb.header)))
        st.text_area("sql_header", key="sql_header", on_change=on_header_change,
                     height=90, label_visibility="collapsed")

        st.markdown(f"**{ui_text('mapping_label')}**")
        st.caption(ui_text("mapped_values", n=count_mapping_columns(wb.mapping)))
        st.text_area("sql_mapping", key="sql_mapping", on_change=on_mapping_change,
                     height=90, label_visibility="collapsed")
        if mapping_mismatch(wb.header, wb.mapping):
            st.warning(ui_text("mismatch", h=count_header_columns(wb.header), m=count_mapping_columns(wb.mapping)))

        tc, bc, rc = st.columns([2, 1, 1])
        with tc:
            st.selectbox(ui_text("add_variable"), mapping_tokens(wb.labels.codes()), key="mapping_token")
        with bc:
            st.button(ui_text("add"), on_click=on_add_token, use_container_width=True)
        with rc:
            st.button(ui_text("restore_defaults"), on_click=on_restore_defaults, use_container_width=True)

    with tab_lang:
        st.markdown(f"**{ui_text('generation_target')}**")
        ac, mc, _ = st.columns([1, 1, 6])
        with ac:
            st.button(ui_text("all"), on_click=on_select_all, args=(True,), use_container_width=True)
        with mc:
            st.button(ui_text("min"), on_click=on_select_all, args=(False,), use_container_width=True)

        check_cols = st.columns(4)
        for i, (code, label) in enumerate(wb.labels.items()):
            bind(f"gen_{code}", code in wb.gen_languages)
            with check_cols[i % 4]:
                st.checkbox(f"{code} · {label}", key=f"gen_{code}",
                            on_change=on_toggle_language, args=(code,))

        st.markdown(f"**{ui_text('extra_language')}**")
        cc, lc, bc = st.columns([1, 2, 1])
        with cc:
            st.text_input(ui_text("code"), key="new_lang_code", placeholder="de")
        with lc:
            st.text_input(ui_text("label"), key="new_lang_label", placeholder="German")
        with bc:
            st.markdown("<br>", unsafe_allow_html=True)
            st.button(ui_text("add_language"), on_click=on_add_language, use_container_width=True)

# ─────────────────────────────────────────────────────────────
# LAYOUT COLUMNS
# ─────────────────────────────────────────────────────────────
left, right = st.columns([1, 1], gap="large")

with left:
    with st.container(border=True):
        st.subheader(ui_text("input_header"))
        st.caption(ui_text("input_caption"))

        uploaded = st.file_uploader(ui_text("upload_label"), type=UPLOAD_EXTENSIONS,
                                    key=f"upload_{ss['upload_nonce']}")
        if uploaded is not None and uploaded.type == PDF_TYPE:
            st.info(ui_text("pdf_supported"))
            page_count = pdf_page_count(uploaded.getvalue())
            if page_count > 1:
                ss["pdf_page_index"] = st.slider(ui_text("pages"), 1, page_count,
                                                 min(ss["pdf_page_index"], page_count - 1) + 1) - 1
            else:
                ss["pdf_page_index"] = 0
            st.image(render_pdf_page_thumb(uploaded.getvalue(), ss["pdf_page_index"], 1.0), width=240)
        elif uploaded is not None:
            st.image(uploaded.getvalue(), width=240)

        with st.form("generate_form", clear_on_submit=False):
            st.text_area("input_text", key="input_text", placeholder=ui_text("input_placeholder"),
                         height=90, label_visibility="collapsed")
            submitted = st.form_submit_button(ui_text("generate"), use_container_width=True)

    if submitted:
        try:
            image = prepare_upload(uploaded)
        except LocalizerError as e:
            st.error(f"{ui_text('error_file_proc')} {e}")
            log.warning("Upload rejected: %s", e)
        except Exception as e:
            st.error(f"{ui_text('error_file_proc')} {e}")
            log.exception("Could not read upload")
        else:
            with st.spinner(ui_text("spinner_generate")):
                entry = wb.generate(ss.get("input_text", ""), image=image)
            if entry is not None:
                ss["reset_input"] = True
                st.rerun()

    if wb.error:
        st.error(wb.error)

    # Entries
    hc, cc = st.columns([3, 1])
    with hc:
        st.markdown(f"### {ui_text('entries_header', n=len(wb.store))}")
    with cc:
        if wb.store:
            with st.popover(ui_text("clear_all"), use_container_width=True):
                st.write(ui_text("clear_confirm"))
                st.button(ui_text("confirm"), on_click=wb.clear, key="clear_confirm", type="primary")

    if not wb.store:
        st.write(ui_text("no_entries"))

    for entry in wb.store:
        with st.container(border=True):
            k1, k2, dc = st.columns([2, 3, 1])
            for col, name, placeholder in ((k1, "key1", "CAT"), (k2, "key2", "SUB_CODE")):
                bind(f"{name}_{entry.id}", entry.key1 if name == "key1" else entry.key2)
                with col:
                    st.text_input(name, key=f"{name}_{entry.id}", placeholder=placeholder,
                                  on_change=on_key_change, args=(entry.id, name))
            with dc:
                st.markdown("<br>", unsafe_allow_html=True)
                st.button("🗑️", key=f"del_{entry.id}", help=ui_text("delete"),
                          on_click=wb.delete, args=(entry.id,))

            for lang in wb.entry_languages(entry):
                widget = f"tr_{entry.id}_{lang}"
                bind(widget, entry.translations.get(lang, ""))
                lc, rc = st.columns([6, 1])
                with lc:
                    st.markdown(f"<span class='lang-code'>{lang}</span> · {wb.labels.label_for(lang)}",
                                unsafe_allow_html=True)
                with rc:
                    st.button("✨", key=f"refine_{entry.id}_{lang}", help=ui_text("refine"),
                              on_click=on_refine, args=(entry.id, lang))
                st.text_area(lang, key=widget, height=68, label_visibility="collapsed",
                             on_change=on_translation_change, args=(entry.id, lang))

with right:
    with st.container(border=True):
        st.subheader(ui_text("sql_output"))
        bind("sql_view", ui_text("annotated") if wb.annotated else ui_text("compact"))
        st.radio(ui_text("view_mode"), [ui_text("compact"), ui_text("annotated")], key="sql_view",
                 horizontal=True, on_change=on_view_change)

        sql = wb.sql()
        st.code(sql, language="sql")
        components_copy_button("sql", sql, ui_text("copy"))

        if wb.store:
            languages = wb.export_languages()
            ec1, ec2, ec3 = st.columns(3)
            with ec1:
                st.download_button(
                    ui_text("export_sql"),
                    data=export_sql(sql),
                    file_name=export_filename("sql"),
                    mime="application/sql",
                    use_container_width=True,
                )
            with ec2:
                st.download_button(
                    ui_text("export_csv"),
                    data=export_csv(wb.store, languages),
                    file_name=export_filename("csv"),
                    mime="text/csv",
                    use_container_width=True,
                )
            with ec3:
                st.download_button(
                    ui_text("export_docx"),
                    data=export_docx(wb.store, languages, dict(wb.labels.items())),
                    file_name=export_filename("docx"),
                    mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                    use_container_width=True,
                )
