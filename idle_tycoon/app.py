import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pygame

from .campaign import Campaign
from .economy import ItemDef, upgrade_multiplier
from .numfmt import format_multiplier, format_number
from .persistence import (
    Settings,
    load_settings,
    save_path_for,
    save_settings,
    settings_path_for,
    try_load_game,
)
from .prestige import prod_multiplier
from .production import item_production, unit_production
from .session import Session

logger = logging.getLogger(__name__)

WIDTH, HEIGHT = 1100, 720
FPS = 30
BG_COLOR = (18, 24, 32)
PANEL_COLOR = (28, 38, 52)
TEXT_COLOR = (230, 235, 245)
MUTED_COLOR = (120, 138, 160)
ACCENT_COLOR = (255, 221, 89)
GOOD_COLOR = (106, 212, 148)
HEADER_COLOR = (164, 192, 228)
MESSAGE_COLOR = (179, 207, 255)
BUTTON_COLOR = (56, 76, 104)
BUTTON_HOVER = (88, 122, 167)
SELECTED_ROW = (74, 66, 30)
BAR_EMPTY = (40, 52, 70)

MENU_OPTIONS = ("Continue", "New Game", "Settings", "Exit")
IN_GAME_PAGES = ("play", "shop", "upgrades", "prestige", "level")

Column = Tuple[str, int, bool]


class IdleTycoonApp:
    def __init__(self, save_path: Path, settings_path: Path, campaign: Optional[Campaign] = None) -> None:
        pygame.init()
        pygame.display.set_caption("Idle Tycoon")
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        self.clock = pygame.time.Clock()
        self.font = self._load_font(22)
        self.small_font = self._load_font(18)
        self.heading_font = self._load_font(30, bold=True)
        self.large_font = self._load_font(48, bold=True)

        self.save_path = save_path
        self.settings_path = settings_path
        self.campaign = campaign or Campaign.default()
        self.settings: Settings = load_settings(settings_path)
        self.session: Optional[Session] = None

        self.running = True
        self.page = "menu"
        self.menu_index = 0
        self.shop_index = 0
        self.upgrade_index = 0
        self.confirm_exit = False
        self.settings_draft = Settings(autosave_seconds=self.settings.autosave_seconds)
        self.message = "Use Up/Down and Enter, or click an option."
        self.click_targets: List[Dict[str, object]] = []

    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self._handle_events()
            if self.session is not None and self.page in IN_GAME_PAGES:
                self.session.tick(dt)
            self._draw()
            pygame.display.flip()
        if self.session is not None:
            self.session.save()
        pygame.quit()

    # ------------------------------------------------------------------ input

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos)

    def _handle_key(self, key: int) -> None:
        handler: Callable[[int], None] = getattr(self, f"_key_{self.page}")
        handler(key)

    def _handle_click(self, pos: Tuple[int, int]) -> None:
        for target in self.click_targets:
            rect = target["rect"]
            if rect.collidepoint(pos):
                action = target["action"]
                action()
                return

    def _key_menu(self, key: int) -> None:
        if key == pygame.K_UP:
            self.menu_index = (self.menu_index - 1) % len(MENU_OPTIONS)
        elif key == pygame.K_DOWN:
            self.menu_index = (self.menu_index + 1) % len(MENU_OPTIONS)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._choose_menu(MENU_OPTIONS[self.menu_index])
        elif key == pygame.K_ESCAPE:
            self.running = False

    def _choose_menu(self, option: str) -> None:
        if option == "Continue":
            state = try_load_game(self.save_path, self.campaign)
            if state is None:
                self.message = "No save found. Start a new game first."
                return
            self._start_session(Session(state, self.campaign, self.settings, self.save_path))
            self.session.message = f"Resumed in {self.session.level.name}."
        elif option == "New Game":
            self._start_session(Session.new_game(self.campaign, self.settings, self.save_path))
            self.session.save()
        elif option == "Settings":
            self.settings_draft = Settings(autosave_seconds=self.settings.autosave_seconds)
            self.page = "settings"
        elif option == "Exit":
            self.running = False

    def _start_session(self, session: Session) -> None:
        self.session = session
        self.page = "play"
        self.shop_index = 0
        self.upgrade_index = 0
        self.confirm_exit = False
        logger.info("Playing %s", session.level.name)

    def _key_play(self, key: int) -> None:
        if key != pygame.K_ESCAPE:
            self.confirm_exit = False
        if key == pygame.K_SPACE:
            self.session.collect()
        elif key == pygame.K_s:
            self._open_shop()
        elif key == pygame.K_u:
            self._open_upgrades()
        elif key == pygame.K_l:
            self._open_level_complete()
        elif key == pygame.K_p:
            self.page = "prestige"
        elif key == pygame.K_F5:
            self.session.manual_save()
        elif key == pygame.K_ESCAPE:
            self._request_exit()

    def _request_exit(self) -> None:
        if not self.confirm_exit:
            self.confirm_exit = True
            self.session.message = "Press Esc again to exit, any other key to stay."
            return
        self.session.save()
        self.session = None
        self.confirm_exit = False
        self.page = "menu"
        self.message = "Progress saved."

    def _open_shop(self) -> None:
        self.shop_index = max(0, min(self.shop_index, len(self.session.catalog) - 1))
        self.page = "shop"

    def _owned_defs(self) -> List[ItemDef]:
        state = self.session.state
        return [item for item in self.session.catalog if state.quantity_of(item.id) > 0]

    def _open_upgrades(self) -> None:
        if not self._owned_defs():
            self.session.message = "You don't own any producers yet."
            return
        self.upgrade_index = 0
        self.page = "upgrades"

    def _open_level_complete(self) -> None:
        if not self.session.goal_reached:
            self.session.message = "Level goal not yet reached."
            return
        self.page = "level"

    def _key_shop(self, key: int) -> None:
        items = self.session.catalog.items
        if not items or key in (pygame.K_s, pygame.K_b, pygame.K_ESCAPE):
            self.page = "play"
        elif key == pygame.K_UP:
            self.shop_index = (self.shop_index - 1) % len(items)
        elif key == pygame.K_DOWN:
            self.shop_index = (self.shop_index + 1) % len(items)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.session.buy(items[self.shop_index].id)

    def _key_upgrades(self, key: int) -> None:
        owned = self._owned_defs()
        if not owned or key in (pygame.K_u, pygame.K_b, pygame.K_ESCAPE):
            self.page = "play"
        elif key == pygame.K_UP:
            self.upgrade_index = (self.upgrade_index - 1) % len(owned)
        elif key == pygame.K_DOWN:
            self.upgrade_index = (self.upgrade_index + 1) % len(owned)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.session.upgrade(owned[self.upgrade_index].id)

    def _key_prestige(self, key: int) -> None:
        if key in (pygame.K_p, pygame.K_RETURN, pygame.K_KP_ENTER):
            self._confirm_prestige()
        elif key in (pygame.K_ESCAPE, pygame.K_b):
            self.page = "play"

    def _confirm_prestige(self) -> None:
        if self.session.prestige() > 0:
            self.shop_index = 0
        self.page = "play"

    def _key_level(self, key: int) -> None:
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER) and self.session.next_level is not None:
            self._advance_level()
        elif key in (pygame.K_c, pygame.K_ESCAPE):
            self.page = "play"

    def _advance_level(self) -> None:
        if self.session.advance_level():
            self.shop_index = 0
            self.upgrade_index = 0
        self.page = "play"

    def _key_settings(self, key: int) -> None:
        if key == pygame.K_LEFT:
            self._cycle_autosave(-1)
        elif key == pygame.K_RIGHT:
            self._cycle_autosave(1)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._apply_settings()
        elif key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self.page = "menu"

    def _cycle_autosave(self, step: int) -> None:
        self.settings_draft.cycle_autosave(step)

    def _apply_settings(self) -> None:
        self.settings.autosave_seconds = self.settings_draft.autosave_seconds
        if save_settings(self.settings, self.settings_path):
            self.message = "Settings saved."
        else:
            self.message = "Could not save settings."
        self.page = "menu"

    # ---------------------------------------------------------------- drawing

    def _draw(self) -> None:
        self.click_targets = []
        self.screen.fill(BG_COLOR)
        drawer: Callable[[], None] = getattr(self, f"_draw_{self.page}")
        drawer()

    def _draw_menu(self) -> None:
        self._draw_centered("Idle Tycoon", 90, self.large_font, ACCENT_COLOR)
        self._draw_centered("Use Up/Down to move, Enter to select", 150, self.small_font, MUTED_COLOR)
        mouse_pos = pygame.mouse.get_pos()
        for idx, option in enumerate(MENU_OPTIONS):
            rect = pygame.Rect(0, 0, 280, 46)
            rect.center = (WIDTH // 2, 230 + idx * 64)
            selected = idx == self.menu_index
            self._draw_button(rect, option, mouse_pos, highlight=selected)
            self.click_targets.append({"rect": rect, "action": lambda o=option: self._choose_menu(o)})
        self._draw_centered(self.message, HEIGHT - 60, self.small_font, MESSAGE_COLOR)

    def _draw_settings(self) -> None:
        self._draw_centered("Settings", 90, self.large_font, ACCENT_COLOR)
        self._draw_centered(
            "Use Left/Right to change. Enter to confirm. Esc to return.", 150, self.small_font, MUTED_COLOR
        )
        self._draw_centered(f"Autosave interval: {self.settings_draft.autosave_label}", 260, self.font, TEXT_COLOR)

        mouse_pos = pygame.mouse.get_pos()
        prev_rect = pygame.Rect(WIDTH // 2 - 190, 245, 40, 32)
        next_rect = pygame.Rect(WIDTH // 2 + 150, 245, 40, 32)
        save_rect = pygame.Rect(0, 0, 200, 44)
        save_rect.center = (WIDTH // 2, 360)
        self._draw_button(prev_rect, "<", mouse_pos)
        self._draw_button(next_rect, ">", mouse_pos)
        self._draw_button(save_rect, "Save settings", mouse_pos)
        self.click_targets.append({"rect": prev_rect, "action": lambda: self._cycle_autosave(-1)})
        self.click_targets.append({"rect": next_rect, "action": lambda: self._cycle_autosave(1)})
        self.click_targets.append({"rect": save_rect, "action": self._apply_settings})

    def _draw_hud(self) -> None:
        session = self.session
        state = session.state
        level = session.level

        pygame.draw.rect(self.screen, PANEL_COLOR, pygame.Rect(0, 0, WIDTH, 64))
        self._blit(f"Money: {format_number(state.money)}", (24, 18), self.heading_font, TEXT_COLOR)
        self._blit(
            f"Prod/s: {format_number(session.production_per_second)}",
            (WIDTH // 2, 18),
            self.heading_font,
            GOOD_COLOR,
        )

        self._blit(
            f"Level: {level.name}   Goal: {format_number(level.goal_money)}",
            (24, 80),
            self.font,
            TEXT_COLOR,
        )
        self._draw_progress_bar(pygame.Rect(24, 112, WIDTH - 48, 22), session.goal_progress)
        if session.goal_reached:
            hint = "Goal reached! Press L to finish the level."
            self._blit(hint, (24, 140), self.small_font, ACCENT_COLOR)

    def _draw_play(self) -> None:
        self._draw_hud()
        state = self.session.state

        multiplier = prod_multiplier(state.prestige_credits)
        self._blit(
            f"Prestige: {state.prestige_credits} ({format_multiplier(multiplier)})",
            (24, 168),
            self.small_font,
            ACCENT_COLOR,
        )
        self._blit("Owned Producers:", (24, 196), self.font, HEADER_COLOR)

        columns: Sequence[Column] = (("Name", 260, False), ("Qty", 80, True), ("Lv", 60, True),
                                     ("Unit/s", 150, True), ("Total/s", 150, True))
        y = 232
        self._draw_columns(y, 40, columns, HEADER_COLOR)
        pygame.draw.line(self.screen, MUTED_COLOR, (40, y + 26), (40 + 700, y + 26))
        y += 36

        owned = self._owned_defs()
        if not owned:
            self._blit("(None yet, visit the Shop with 'S')", (40, y), self.small_font, MUTED_COLOR)
        for item in owned:
            st = state.get_item_state(item.id)
            per_unit = unit_production(item, st.upgrade_level, state.prestige_credits)
            self._draw_columns(y, 40, (
                (item.name, 260, False),
                (str(st.quantity), 80, True),
                (str(st.upgrade_level), 60, True),
                (format_number(per_unit), 150, True),
                (format_number(item_production(item, st, state.prestige_credits)), 150, True),
            ), TEXT_COLOR)
            y += 28

        self._draw_message_bar()
        self._draw_bottom_menu()

    def _draw_bottom_menu(self) -> None:
        entries = (
            ("[Space] Collect", self.session.collect),
            ("[S] Shop", self._open_shop),
            ("[U] Upgrades", self._open_upgrades),
            ("[L] Level up", self._open_level_complete),
            ("[P] Prestige", lambda: setattr(self, "page", "prestige")),
            ("[F5] Save", self.session.manual_save),
            ("[Esc] Menu", self._request_exit),
        )
        mouse_pos = pygame.mouse.get_pos()
        width = (WIDTH - 48 - 6 * 8) // len(entries)
        x = 24
        for label, action in entries:
            rect = pygame.Rect(x, HEIGHT - 58, width, 38)
            self._draw_button(rect, label, mouse_pos, font=self.small_font)
            self.click_targets.append({"rect": rect, "action": action})
            x += width + 8

    def _draw_message_bar(self) -> None:
        rect = pygame.Rect(0, HEIGHT - 100, WIDTH, 34)
        pygame.draw.rect(self.screen, (42, 58, 78), rect)
        self._blit(self.session.message, (24, rect.y + 8), self.small_font, MESSAGE_COLOR)

    def _draw_shop(self) -> None:
        session = self.session
        state = session.state
        self._draw_centered("Shop", 40, self.large_font, GOOD_COLOR)
        self._draw_centered(f"Money: {format_number(state.money)}", 86, self.font, TEXT_COLOR)
        self._draw_centered("Up/Down select  -  Enter buy  -  B to go back", 116, self.small_font, MUTED_COLOR)

        columns: Sequence[Column] = (("Name", 240, False), ("Unit/s", 140, True), ("Price", 160, True),
                                     ("Owned", 90, True), ("Lv", 60, True))
        y = 160
        self._draw_columns(y, 60, columns, HEADER_COLOR)
        y += 36
        mouse_pos = pygame.mouse.get_pos()
        for idx, item in enumerate(session.catalog):
            qty = state.quantity_of(item.id)
            level = state.upgrade_level_of(item.id)
            row_rect = pygame.Rect(48, y - 6, WIDTH - 96, 34)
            if idx == self.shop_index:
                pygame.draw.rect(self.screen, SELECTED_ROW, row_rect, border_radius=6)
            price = session.price_of(item.id)
            affordable = state.money >= price
            self._draw_columns(y, 60, (
                (item.name, 240, False),
                (format_number(unit_production(item, level, state.prestige_credits)), 140, True),
                (format_number(price), 160, True),
                (str(qty), 90, True),
                (str(level), 60, True),
            ), TEXT_COLOR if affordable else MUTED_COLOR)
            buy_rect = pygame.Rect(WIDTH - 150, y - 4, 90, 28)
            self._draw_button(buy_rect, "Buy", mouse_pos, font=self.small_font)
            self.click_targets.append({"rect": buy_rect, "action": lambda i=idx: self._click_buy(i)})
            y += 44

        self._draw_message_bar()
        self._draw_back_button()

    def _click_buy(self, index: int) -> None:
        self.shop_index = index
        self.session.buy(self.session.catalog.items[index].id)

    def _draw_upgrades(self) -> None:
        session = self.session
        state = session.state
        self._draw_centered("Upgrades", 40, self.large_font, HEADER_COLOR)
        self._draw_centered(f"Money: {format_number(state.money)}", 86, self.font, TEXT_COLOR)
        self._draw_centered("Up/Down select  -  Enter upgrade  -  B to go back", 116, self.small_font, MUTED_COLOR)

        columns: Sequence[Column] = (("Name", 240, False), ("Lv", 60, True),
                                     ("Mult (cur -> next)", 220, True), ("Upgrade", 160, True))
        y = 160
        self._draw_columns(y, 60, columns, HEADER_COLOR)
        y += 36
        mouse_pos = pygame.mouse.get_pos()
        for idx, item in enumerate(self._owned_defs()):
            level = state.upgrade_level_of(item.id)
            row_rect = pygame.Rect(48, y - 6, WIDTH - 96, 34)
            if idx == self.upgrade_index:
                pygame.draw.rect(self.screen, SELECTED_ROW, row_rect, border_radius=6)
            mult_text = (
                f"{format_multiplier(upgrade_multiplier(level))} -> "
                f"{format_multiplier(upgrade_multiplier(level + 1))}"
            )
            self._draw_columns(y, 60, (
                (item.name, 240, False),
                (str(level), 60, True),
                (mult_text, 220, True),
                (format_number(session.upgrade_price_of(item.id)), 160, True),
            ), TEXT_COLOR)
            up_rect = pygame.Rect(WIDTH - 170, y - 4, 110, 28)
            self._draw_button(up_rect, "Upgrade", mouse_pos, font=self.small_font)
            self.click_targets.append({"rect": up_rect, "action": lambda i=idx: self._click_upgrade(i)})
            y += 44

        self._draw_message_bar()
        self._draw_back_button()

    def _click_upgrade(self, index: int) -> None:
        owned = self._owned_defs()
        if 0 <= index < len(owned):
            self.upgrade_index = index
            self.session.upgrade(owned[index].id)

    def _draw_prestige(self) -> None:
        summary = self.session.prestige_summary()
        self._draw_centered("Prestige", 60, self.large_font, ACCENT_COLOR)
        rows = (
            ("Lifetime", format_number(summary["lifetime"])),
            ("Credits", str(int(summary["credits"]))),
            ("Multiplier", format_multiplier(summary["multiplier"])),
            ("Now available", str(int(summary["available"]))),
            ("Next target", format_number(summary["next_target"])),
            ("Remaining", format_number(summary["remaining"])),
        )
        y = 150
        pygame.draw.line(self.screen, MUTED_COLOR, (WIDTH // 2 - 220, y - 10), (WIDTH // 2 + 220, y - 10))
        for label, value in rows:
            color = MUTED_COLOR if label == "Remaining" else TEXT_COLOR
            self._draw_columns(y, WIDTH // 2 - 220, ((label, 200, False), (value, 240, True)), color)
            y += 34

        mouse_pos = pygame.mouse.get_pos()
        if summary["available"] > 0:
            self._draw_centered(
                "Prestiging resets money, producers and levels for a permanent boost.",
                y + 20, self.small_font, MESSAGE_COLOR,
            )
            confirm_rect = pygame.Rect(0, 0, 220, 44)
            confirm_rect.center = (WIDTH // 2, y + 90)
            self._draw_button(confirm_rect, "Confirm (Enter)", mouse_pos)
            self.click_targets.append({"rect": confirm_rect, "action": self._confirm_prestige})
        else:
            self._draw_centered("No credits available yet.", y + 20, self.small_font, MUTED_COLOR)
        self._draw_back_button()

    def _draw_level(self) -> None:
        session = self.session
        level = session.level
        nxt = session.next_level
        self._draw_centered("Level Complete!", 90, self.large_font, GOOD_COLOR)
        self._draw_centered(f"You reached the goal for '{level.name}'.", 170, self.font, TEXT_COLOR)

        mouse_pos = pygame.mouse.get_pos()
        stay_rect = pygame.Rect(0, 0, 220, 44)
        if nxt is not None:
            self._draw_centered(f"Next: {nxt.name}", 220, self.font, HEADER_COLOR)
            self._draw_centered(
                "[Enter] Advance  -  [C] Continue here  -  [Esc] Cancel", 270, self.small_font, MUTED_COLOR
            )
            advance_rect = pygame.Rect(0, 0, 220, 44)
            advance_rect.center = (WIDTH // 2 - 130, 340)
            stay_rect.center = (WIDTH // 2 + 130, 340)
            self._draw_button(advance_rect, "Advance", mouse_pos)
            self.click_targets.append({"rect": advance_rect, "action": self._advance_level})
        else:
            self._draw_centered(
                "This is the last level in the campaign (for now).", 220, self.font, HEADER_COLOR
            )
            self._draw_centered("[C] Continue here  -  [Esc] Close", 270, self.small_font, MUTED_COLOR)
            stay_rect.center = (WIDTH // 2, 340)
        self._draw_button(stay_rect, "Continue here", mouse_pos)
        self.click_targets.append({"rect": stay_rect, "action": lambda: setattr(self, "page", "play")})

    def _draw_back_button(self) -> None:
        rect = pygame.Rect(24, HEIGHT - 58, 140, 38)
        self._draw_button(rect, "Back", pygame.mouse.get_pos(), font=self.small_font)
        self.click_targets.append({"rect": rect, "action": lambda: setattr(self, "page", "play")})

    def _draw_progress_bar(self, rect: pygame.Rect, fraction: float) -> None:
        fraction = max(0.0, min(1.0, fraction))
        pygame.draw.rect(self.screen, BAR_EMPTY, rect, border_radius=6)
        filled = rect.copy()
        filled.width = int(rect.width * fraction)
        if filled.width > 0:
            pygame.draw.rect(self.screen, GOOD_COLOR, filled, border_radius=6)
        label = self.small_font.render(f"{fraction * 100:.1f}%", True, TEXT_COLOR)
        self.screen.blit(label, label.get_rect(center=rect.center))

    def _draw_columns(
        self,
        y: int,
        x: int,
        columns: Sequence[Column],
        color: Tuple[int, int, int],
    ) -> None:
        for text, width, right_align in columns:
            surface = self.small_font.render(text, True, color)
            if right_align:
                self.screen.blit(surface, surface.get_rect(topright=(x + width, y)))
            else:
                self.screen.blit(surface, (x, y))
            x += width + 12

    def _draw_centered(self, text: str, y: int, font: pygame.font.Font, color: Tuple[int, int, int]) -> None:
        surface = font.render(text, True, color)
        self.screen.blit(surface, surface.get_rect(center=(WIDTH // 2, y)))

    def _blit(self, text: str, pos: Tuple[int, int], font: pygame.font.Font, color: Tuple[int, int, int]) -> None:
        self.screen.blit(font.render(text, True, color), pos)

    def _draw_button(
        self,
        rect: pygame.Rect,
        label: str,
        mouse_pos: Tuple[int, int],
        *,
        font: pygame.font.Font | None = None,
        highlight: bool = False,
    ) -> None:
        if highlight:
            color = (140, 118, 40)
        else:
            color = BUTTON_HOVER if rect.collidepoint(mouse_pos) else BUTTON_COLOR
        pygame.draw.rect(self.screen, color, rect, border_radius=6)
        pygame.draw.rect(self.screen, (16, 22, 30), rect, width=2, border_radius=6)
        font_obj = font or self.font
        text_surface = font_obj.render(label, True, TEXT_COLOR)
        text_rect = text_surface.get_rect(center=rect.center)
        self.screen.blit(text_surface, text_rect)

    def _load_font(self, size: int, *, bold: bool = False) -> pygame.font.Font:
        preferred = [
            "dejavu sans mono",
            "consolas",
            "menlo",
            "source code pro",
            "courier new",
        ]
        path = pygame.font.match_font(preferred, bold=bold)
        font = pygame.font.Font(path, size) if path else pygame.font.Font(None, size)
        if bold and not font.get_bold():
            font.set_bold(True)
        return font


def run_app(data_dir: Path, campaign: Optional[Campaign] = None) -> None:
    app = IdleTycoonApp(save_path_for(data_dir), settings_path_for(data_dir), campaign)
    app.run()
