"""
Browser text-to-speech snippet.

Streamlit renders this through `components.html`; the script speaks once
each time it is mounted.
"""

import json

DEFAULT_RATE = 0.8  # a little slower for young listeners

_TEMPLATE = """
<script>
(function() {{
  const synth = window.parent.speechSynthesis || window.speechSynthesis;
  if (!synth) return;
  const text = {text};
  const lang = {lang};

  function pickVoice() {{
    const voices = synth.getVoices() || [];
    if (!voices.length) return null;
    const match = voices.find(v => v.lang && v.lang.toLowerCase().startsWith(lang));
    return match || voices[0];
  }}

  function say() {{
    const Utterance = window.parent.SpeechSynthesisUtterance || window.SpeechSynthesisUtterance;
    const u = new Utterance(text);
    const voice = pickVoice();
    if (voice) u.voice = voice;
    u.rate = {rate};
    synth.cancel();
    synth.speak(u);
  }}

  // voices load lazily on some browsers (iOS, Chrome)
  if (!synth.getVoices().length && "onvoiceschanged" in synth) {{
    synth.onvoiceschanged = () => {{ synth.onvoiceschanged = null; say(); }};
    setTimeout(() => {{ if (synth.onvoiceschanged) {{ synth.onvoiceschanged = null; say(); }} }}, 300);
  }} else {{
    say();
  }}
}})();
</script>
"""


def speak_html(text: str, lang: str = "en", rate: float = DEFAULT_RATE) -> str:
    """HTML that speaks `text` with a voice matching the two-letter `lang`."""
    return _TEMPLATE.format(
        text=json.dumps(text).replace("</", "<\\/"),
        lang=json.dumps((lang or "en")[:2].lower()),
        rate=float(rate),
    )
