"""
Tabs - Minimal StarBind page

A page with two tabs. Each tab is an element swapped in as the primary
element; the scoreboard tab binds a score that is patched whenever a point
is added. Inbound payloads are simulated with JSON strings and the outbound
Datastar events are printed.
"""

from starbind import (
    BindingType,
    DatastarSink,
    Element,
    EventBinding,
    Page,
    StarBindSettings,
    configure_logging,
)


class Welcome(Element):
    def on_create(self, root, commands, events):
        commands.append("<p>Pick a tab.</p>", root)


class Scoreboard(Element):
    def ui_bindings(self):
        return {"score": "#Score"}

    def on_create(self, root, commands, events):
        commands.append("<p>Score: <span id='Score'></span></p><button id='Add'>+1</button>", root)
        self.score.set(0, commands)
        self.bind_event(
            BindingType.ACTIVATING,
            "#Add",
            events,
            EventBinding.action("add-point")
            .with_event_data("Points", int, "1")
            .on_event(lambda ctx: self.score.set(self.score.get() + ctx.get("Points"))),
        )


class TabsPage(Page):
    def build(self, commands, events):
        commands.append("<nav><button id='Tab1'>Welcome</button><button id='Tab2'>Score</button></nav><main id='Content'></main>")
        self.bind_event(BindingType.ACTIVATING, "#Tab1", events,
                        EventBinding.action("tab-1-selected").on_event(lambda ctx: self.show_primary_element(Welcome(self))))
        self.bind_event(BindingType.ACTIVATING, "#Tab2", events,
                        EventBinding.action("tab-2-selected").on_event(lambda ctx: self.show_primary_element(Scoreboard(self))))


def main():
    settings = StarBindSettings.from_env(log_level="DEBUG")
    configure_logging(settings)

    sink = DatastarSink()
    page = TabsPage(sink, settings=settings)
    page.open()

    for raw in ('{"Action": "tab-2-selected"}', '{"Action": "add-point", "Points": "1"}', '{"Action": "add-point", "Points": "2"}'):
        page.handle_data_event(raw)

    for event in sink.drain():
        print(event)


if __name__ == "__main__":
    main()
