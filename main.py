import pandas as pd
import streamlit as st

from toolcall.config import DEFAULT_PROMPT
from toolcall.gateway import GatewayError
from toolcall.main import build_default_gateway, run_prompt
from toolcall.tools.arithmetic import build_arithmetic_registry

st.title("Tool Calling Demo")
query = st.chat_input(DEFAULT_PROMPT)

if "registry" not in st.session_state:
    st.session_state["registry"] = build_arithmetic_registry()

if query:
    with st.chat_message("user"):
        st.markdown(query)

    try:
        outcome = run_prompt(query, build_default_gateway(), st.session_state["registry"])
    except (GatewayError, RuntimeError) as exc:
        st.error(f"Could not get tool calls from the model: {exc}")
    else:
        with st.chat_message("assistant"):
            if not outcome.requests:
                st.markdown("No tool calls requested.")
            else:
                st.markdown("Detected tools")
                st.dataframe(
                    pd.DataFrame(
                        [{"tool": r.name, "args": str(r.arguments)} for r in outcome.requests]
                    )
                )
                st.markdown("Results")
                st.dataframe(
                    pd.DataFrame(
                        [
                            {
                                "tool": r.request.name,
                                "args": str(r.request.arguments),
                                "ok": r.ok,
                                "result": str(r.value) if r.ok else f"{r.failure.kind}: {r.failure.detail}",
                            }
                            for r in outcome.results
                        ]
                    )
                )
