from dotenv import load_dotenv

from radshield import PIIRedactor, ReportRewriter, RewriteOptions, list_models


load_dotenv()

REPORT = """Patient: Max Mustermann, geb. 12.03.1965
Kontakt: max.mustermann@example.com, Tel. +49 30 12345678
CT Thorax vom 15.01.2024: Rundherd im rechten Oberlappen, 12 mm.
Untersucht von Dr. Schmidt."""

# Redaction alone needs no model
redactor = PIIRedactor()
result = redactor.redact(REPORT)

print(result.redacted)
print(result.to_summary())

restored = redactor.reinsert(result.redacted, result.placeholders)
print(redactor.validate(REPORT, restored, result.placeholders))

# List available models
print("Available models:", list(list_models().keys()))

# Full rewrite through the default model (gpt-4o-mini)
rewriter = ReportRewriter()
output = rewriter.rewrite(REPORT, RewriteOptions(mode="2", layout="strukturiert"))
print(output.to_summary())
print(output.content)

# Alternative: use Claude
# rewriter = ReportRewriter(model="claude-haiku")

# Alternative: keep everything local with Ollama
# rewriter = ReportRewriter(model="llama3.2")
