"""
Kotlin activity source generation.

Emits MainActivity.kt for one app: a builder function per screen, the
Navigator backstack state machine, and the back-press hook that drives it.
Variable names come from per-screen counters so output is a pure function
of the app declaration.
"""

from __future__ import annotations

from ...models.app import (
    Action,
    AppDeclaration,
    ButtonNode,
    ColumnNode,
    GoToAction,
    HttpGetAction,
    ImageNode,
    InputNode,
    LogAction,
    ReadFileAction,
    RowNode,
    ScreenDeclaration,
    TextNode,
    ToastAction,
    WidgetNode,
    WriteFileAction,
)

INDENT = "    "
NOT_FOUND_PREFIX = "Screen not found: "


def kotlin_string(value: str) -> str:
    """Quote a value as a Kotlin string literal, escaping templates and control characters."""
    out = ['"']
    for ch in value:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "$":
            out.append("\\$")
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


HEADER_IMPORTS = [
    "android.graphics.BitmapFactory",
    "android.os.Bundle",
    "android.util.Log",
    "android.view.View",
    "android.view.ViewGroup",
    "android.widget.Button",
    "android.widget.EditText",
    "android.widget.ImageView",
    "android.widget.LinearLayout",
    "android.widget.ScrollView",
    "android.widget.TextView",
    "android.widget.Toast",
    "androidx.activity.ComponentActivity",
    "androidx.activity.OnBackPressedCallback",
    "java.io.File",
    "java.net.URL",
    "java.util.concurrent.ExecutorService",
    "java.util.concurrent.Executors",
    "kotlin.math.roundToInt",
]

NAVIGATOR_SOURCE = f'''/**
 * Screen backstack. The backstack holds previously visited screens; the
 * current screen is kept apart. Every method runs on the UI thread.
 */
class Navigator(
    private val screens: Set<String>,
    home: String,
    private val show: (String) -> Unit,
    private val notify: (String) -> Unit,
    private val exit: () -> Unit,
) {{
    private val backstack = ArrayDeque<String>()

    var current: String = home
        private set

    var exited: Boolean = false
        private set

    val depth: Int
        get() = backstack.size

    fun start() {{
        check(!exited) {{ "Navigator has exited" }}
        show(current)
    }}

    fun goTo(target: String) {{
        check(!exited) {{ "Navigator has exited" }}
        if (target !in screens) {{
            notify("{NOT_FOUND_PREFIX}$target")
            return
        }}
        backstack.addLast(current)
        current = target
        show(target)
    }}

    fun back() {{
        check(!exited) {{ "Navigator has exited" }}
        if (backstack.isEmpty()) {{
            exited = true
            exit()
            return
        }}
        current = backstack.removeAt(backstack.lastIndex)
        show(current)
    }}
}}
'''

HELPERS_SOURCE = '''    private fun dp(value: Int): Int = (value * resources.displayMetrics.density).roundToInt()

    private fun params(orientation: Int, index: Int, spacing: Int): LinearLayout.LayoutParams {
        val vertical = orientation == LinearLayout.VERTICAL
        return LinearLayout.LayoutParams(
            if (vertical) ViewGroup.LayoutParams.MATCH_PARENT else ViewGroup.LayoutParams.WRAP_CONTENT,
            ViewGroup.LayoutParams.WRAP_CONTENT,
        ).apply {
            if (index > 0) {
                if (vertical) topMargin = dp(spacing) else marginStart = dp(spacing)
            }
        }
    }
'''


class _ScreenWriter:
    """Emits the builder function of one screen."""

    def __init__(self, index: int, screen: ScreenDeclaration) -> None:
        self.index = index
        self.screen = screen
        self.lines: list[str] = []
        self._counter = 0

    def _name(self, prefix: str) -> str:
        name = f"{prefix}{self._counter}"
        self._counter += 1
        return name

    def _emit(self, depth: int, text: str) -> None:
        self.lines.append(f"{INDENT * depth}{text}")

    def write(self) -> list[str]:
        self._emit(1, f"private fun screen{self.index}(): View {{")
        root = self._widget(self.screen.root, 2)
        self._emit(2, f"return {root}")
        self._emit(1, "}")
        if self.screen.on_show:
            self.lines.append("")
            self._emit(1, f"private fun onShow{self.index}() {{")
            for action in self.screen.on_show:
                self._action(action, 2)
            self._emit(1, "}")
        return self.lines

    def _widget(self, node: WidgetNode, depth: int) -> str:
        var = self._name("v")
        if isinstance(node, (ColumnNode, RowNode)):
            orientation = "LinearLayout.VERTICAL" if isinstance(node, ColumnNode) else "LinearLayout.HORIZONTAL"
            self._emit(depth, f"val {var} = LinearLayout(this).apply {{")
            self._emit(depth + 1, f"orientation = {orientation}")
            pad = f"dp({node.padding})"
            self._emit(depth + 1, f"setPadding({pad}, {pad}, {pad}, {pad})")
            self._emit(depth, "}")
            for position, child in enumerate(node.children):
                child_var = self._widget(child, depth)
                self._emit(
                    depth,
                    f"{var}.addView({child_var}, params({orientation}, {position}, {node.spacing}))",
                )
        elif isinstance(node, TextNode):
            self._emit(depth, f"val {var} = TextView(this).apply {{")
            self._emit(depth + 1, f"text = {kotlin_string(node.text)}")
            self._emit(depth + 1, f"textSize = {node.size}f")
            self._emit(depth, "}")
        elif isinstance(node, ButtonNode):
            self._emit(depth, f"val {var} = Button(this).apply {{")
            self._emit(depth + 1, f"text = {kotlin_string(node.label)}")
            self._emit(depth + 1, "setOnClickListener {")
            for action in node.actions:
                self._action(action, depth + 2)
            self._emit(depth + 1, "}")
            self._emit(depth, "}")
        elif isinstance(node, InputNode):
            self._emit(depth, f"val {var} = EditText(this).apply {{")
            self._emit(depth + 1, "setSingleLine(true)")
            self._emit(depth + 1, f"hint = {kotlin_string(node.hint)}")
            self._emit(depth + 1, f"setText({kotlin_string(node.value)})")
            self._emit(depth, "}")
            self._emit(depth, f"inputs[{kotlin_string(node.id)}] = {var}")
        elif isinstance(node, ImageNode):
            self._emit(depth, f"val {var} = ImageView(this).apply {{")
            self._emit(
                depth + 1,
                f"assets.open({kotlin_string(node.asset)}).use {{ setImageBitmap(BitmapFactory.decodeStream(it)) }}",
            )
            self._emit(depth, "}")
        return var

    def _action(self, action: Action, depth: int) -> None:
        if isinstance(action, GoToAction):
            self._emit(depth, f"navigator.goTo({kotlin_string(action.target)})")
        elif isinstance(action, ToastAction):
            self._emit(
                depth,
                f"Toast.makeText(this@MainActivity, {kotlin_string(action.message)}, Toast.LENGTH_SHORT).show()",
            )
        elif isinstance(action, LogAction):
            self._emit(depth, f"Log.i({kotlin_string(action.tag)}, {kotlin_string(action.message)})")
        elif isinstance(action, HttpGetAction):
            body = self._name("body")
            self._emit(depth, "background.execute {")
            self._emit(depth + 1, f"val {body} = URL({kotlin_string(action.url)}).readText()")
            if action.into is not None:
                self._emit(depth + 1, f"runOnUiThread {{ inputs[{kotlin_string(action.into)}]?.setText({body}) }}")
            self._emit(depth, "}")
        elif isinstance(action, ReadFileAction):
            content = self._name("content")
            self._emit(depth, "background.execute {")
            self._emit(depth + 1, f"val {content} = File(filesDir, {kotlin_string(action.path)}).readText()")
            self._emit(depth + 1, f"runOnUiThread {{ inputs[{kotlin_string(action.into)}]?.setText({content}) }}")
            self._emit(depth, "}")
        elif isinstance(action, WriteFileAction):
            content = self._name("content")
            self._emit(
                depth,
                f"val {content} = inputs[{kotlin_string(action.source)}]?.text?.toString().orEmpty()",
            )
            self._emit(depth, f"background.execute {{ File(filesDir, {kotlin_string(action.path)}).writeText({content}) }}")


def generate_activity_source(app: AppDeclaration, package_name: str) -> str:
    """Render MainActivity.kt for a validated app."""
    screens = list(app.screens)
    home = screens[0]

    lines: list[str] = [f"package {package_name}", ""]
    lines.extend(f"import {name}" for name in HEADER_IMPORTS)
    lines.append("")
    lines.append(NAVIGATOR_SOURCE)
    lines.append(f"/** Single activity of {kotlin_string(app.name)}; screens swap its content view. */")
    lines.append("class MainActivity : ComponentActivity() {")
    lines.append("")
    lines.append(f"{INDENT}private lateinit var navigator: Navigator")
    lines.append(f"{INDENT}private val background: ExecutorService = Executors.newSingleThreadExecutor()")
    lines.append(f"{INDENT}private val inputs = mutableMapOf<String, EditText>()")
    lines.append("")
    lines.append(
        f"""    override fun onCreate(savedInstanceState: Bundle?) {{
        super.onCreate(savedInstanceState)
        navigator = Navigator(
            screens = SCREENS,
            home = HOME_SCREEN,
            show = ::showScreen,
            notify = {{ message -> Toast.makeText(this, message, Toast.LENGTH_SHORT).show() }},
            exit = {{ finish() }},
        )
        onBackPressedDispatcher.addCallback(this, object : OnBackPressedCallback(true) {{
            override fun handleOnBackPressed() {{
                if (!navigator.exited) navigator.back()
            }}
        }})
        navigator.start()
    }}

    override fun onDestroy() {{
        background.shutdown()
        super.onDestroy()
    }}
"""
    )

    lines.append(f"{INDENT}private fun showScreen(name: String) {{")
    lines.append(f"{INDENT * 2}inputs.clear()")
    lines.append(f"{INDENT * 2}val content = when (name) {{")
    for index, screen in enumerate(screens):
        lines.append(f"{INDENT * 3}{kotlin_string(screen.name)} -> screen{index}()")
    lines.append(f'{INDENT * 3}else -> throw IllegalStateException("Unknown screen: $name")')
    lines.append(f"{INDENT * 2}}}")
    lines.append(f"{INDENT * 2}setContentView(ScrollView(this).apply {{ addView(content) }})")
    with_on_show = [(i, s) for i, s in enumerate(screens) if s.on_show]
    if with_on_show:
        lines.append(f"{INDENT * 2}when (name) {{")
        for index, screen in with_on_show:
            lines.append(f"{INDENT * 3}{kotlin_string(screen.name)} -> onShow{index}()")
        lines.append(f"{INDENT * 2}}}")
    lines.append(f"{INDENT}}}")
    lines.append("")

    for index, screen in enumerate(screens):
        lines.extend(_ScreenWriter(index, screen).write())
        lines.append("")

    lines.append(HELPERS_SOURCE)
    lines.append(f"{INDENT}companion object {{")
    lines.append(f"{INDENT * 2}const val HOME_SCREEN = {kotlin_string(home.name)}")
    names = ", ".join(kotlin_string(s.name) for s in screens)
    lines.append(f"{INDENT * 2}val SCREENS = setOf({names})")
    lines.append(f"{INDENT}}}")
    lines.append("}")
    return "\n".join(lines) + "\n"
