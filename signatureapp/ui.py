"""Browser client: a two-tab page (sign / verify) that talks to the API."""

from signatureapp.modules.manifest import APP_NAME

PAGE = """
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>__APP__ Credentials</title>
  <style>
    body { font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; margin: 40px auto; max-width: 760px; color: #1f2937; }
    h1 { margin-bottom: 4px; }
    .hint { color: #555; margin-top: 0; }
    .tabs { display: flex; gap: 8px; margin: 24px 0; }
    .tabs button { flex: 1; padding: 12px; font-size: 16px; border: 1px solid #ddd; background: #fff; border-radius: 6px; cursor: pointer; }
    .tabs button.active { background: #7c3aed; color: #fff; border-color: #7c3aed; }
    form { display: grid; gap: 12px; }
    input, button { padding: 10px; font-size: 16px; }
    img.preview { max-width: 100%; max-height: 280px; border-radius: 6px; }
    .panel { border: 1px solid #e5e7eb; border-radius: 8px; padding: 16px; margin-top: 16px; }
    .ok { border-color: #16a34a; background: #f0fdf4; }
    .bad { border-color: #dc2626; background: #fef2f2; }
    .error { color: #b91c1c; }
    dt { font-weight: 600; margin-top: 8px; }
    dd { margin-left: 0; }
    [hidden] { display: none !important; }
  </style>
</head>
<body>
  <h1>__APP__ Credentials</h1>
  <p class="hint">Sign and verify images with C2PA content credentials. Files are processed in memory only.</p>

  <div class="tabs">
    <button type="button" id="tab-sign" class="active">Sign Image</button>
    <button type="button" id="tab-verify">Verify Image</button>
  </div>

  <form id="sign-form">
    <label>Image (jpeg, png, gif, webp)
      <input type="file" name="file" accept="image/jpeg,image/png,image/gif,image/webp">
    </label>
    <label>Author name
      <input type="text" name="author" minlength="2" maxlength="100" placeholder="Jane Doe">
    </label>
    <label>Signature
      <input type="text" name="signature" minlength="3" maxlength="200" placeholder="Jane's Mark">
    </label>
    <button type="submit">Sign image</button>
  </form>

  <form id="verify-form" hidden>
    <label>Image to verify
      <input type="file" name="file">
    </label>
    <button type="submit">Verify image</button>
  </form>

  <img class="preview" id="preview" hidden alt="">
  <p class="error" id="error" hidden></p>
  <div id="result"></div>

<script>
const $ = (id) => document.getElementById(id);

function reset() {
  $("error").hidden = true;
  $("result").innerHTML = "";
  $("preview").hidden = true;
  document.querySelectorAll("form").forEach((f) => f.reset());
}

function showTab(name) {
  reset();
  $("sign-form").hidden = name !== "sign";
  $("verify-form").hidden = name !== "verify";
  $("tab-sign").classList.toggle("active", name === "sign");
  $("tab-verify").classList.toggle("active", name === "verify");
}

function fail(message) {
  $("error").textContent = message;
  $("error").hidden = false;
}

function esc(value) {
  const div = document.createElement("div");
  div.textContent = value == null ? "" : String(value);
  return div.innerHTML;
}

function row(label, value) {
  return value == null || value === "" ? "" : "<dt>" + esc(label) + "</dt><dd>" + esc(value) + "</dd>";
}

document.querySelectorAll("input[type=file]").forEach((input) => {
  input.addEventListener("change", () => {
    const file = input.files[0];
    if (!file) return;
    $("preview").src = URL.createObjectURL(file);
    $("preview").hidden = false;
    $("error").hidden = true;
    $("result").innerHTML = "";
  });
});

$("tab-sign").addEventListener("click", () => showTab("sign"));
$("tab-verify").addEventListener("click", () => showTab("verify"));

$("sign-form").addEventListener("submit", async (event) => {
  event.preventDefault();
  const form = event.target;
  const file = form.file.files[0];
  if (!file || !form.author.value.trim() || !form.signature.value.trim()) {
    return fail("Please fill in all fields");
  }
  $("error").hidden = true;
  $("result").innerHTML = "<p>Signing...</p>";

  const response = await fetch("upload", { method: "POST", body: new FormData(form) });
  if (!response.ok) {
    $("result").innerHTML = "";
    const data = await response.json().catch(() => ({}));
    return fail(data.error || "Signing failed");
  }
  const disposition = response.headers.get("Content-Disposition") || "";
  const match = disposition.match(/filename="([^"]+)"/);
  const name = match ? match[1] : "signed_" + file.name;
  const url = URL.createObjectURL(await response.blob());
  $("result").innerHTML =
    '<div class="panel ok"><p>Image signed.</p><a id="download" download="' + esc(name) + '" href="' + url + '">Download ' + esc(name) + "</a></div>";
});

$("verify-form").addEventListener("submit", async (event) => {
  event.preventDefault();
  const file = event.target.file.files[0];
  if (!file) return fail("Please upload an image to verify");
  $("error").hidden = true;
  $("result").innerHTML = "<p>Verifying...</p>";

  const response = await fetch("verify", { method: "POST", body: new FormData(event.target) });
  const data = await response.json().catch(() => ({}));
  if (!response.ok) {
    $("result").innerHTML = "";
    return fail(data.error || "Verification failed");
  }

  const good = data.signed && data.verified;
  let html = '<div class="panel ' + (good ? "ok" : "bad") + '"><h3>' + (good ? "Content credentials found" : "No valid credentials") + "</h3>";
  if (data.message) html += "<p>" + esc(data.message) + "</p>";
  if (data.content) {
    html += "<dl>" + row("File", data.content.filename) + row("Title", data.content.title) +
      row("Issued by", data.content.issuer) + row("Format", data.content.format) + "</dl>";
  }
  if (data.process && data.process.actions && data.process.actions.length) {
    html += "<dl>" + row("App or device used", data.process.appOrDeviceUsed) + "</dl><ul>";
    data.process.actions.forEach((a) => {
      html += "<li>" + esc(a.type) + (a.tool ? " by " + esc(a.tool) : "") + (a.timestamp ? " at " + esc(a.timestamp) : "") + "</li>";
    });
    html += "</ul>";
  }
  if (data.ingredients && data.ingredients.length) {
    html += "<dt>Ingredients</dt><ul>";
    data.ingredients.forEach((i) => {
      html += "<li>" + esc(i.title) + (i.format ? " (" + esc(i.format) + ")" : "") + " from " + esc(i.issuer) + "</li>";
    });
    html += "</ul>";
  }
  if (data.author) html += "<dl>" + row("Author", data.author.name) + row("Identifier", data.author.identifier) + "</dl>";
  if (data.note) html += "<dl>" + row("Note", data.note) + "</dl>";
  if (data.credential) {
    html += "<dl>" + row("Credential issued by", data.credential.issuedBy) +
      row("Algorithm", (data.credential.algorithm || "").toUpperCase()) + row("Timestamp", data.credential.timestamp) + "</dl>";
  }
  $("result").innerHTML = html + "</div>";
});
</script>
</body>
</html>
"""


def render_page():
    return PAGE.replace("__APP__", APP_NAME)
