"""Interactive CLI application."""
import sys
import time
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from vocab_drill.dashboard import get_accuracy_color, get_learning_stats, get_revision_words
from vocab_drill.db import (
    DEFAULT_DB_PATH, clear_progress, clear_vocabulary, init_db, load_history,
    load_progress, load_vocabulary, save_history, save_progress,
)
from vocab_drill.importer import VocabularyParseError, import_file, import_text, validate_input
from vocab_drill.models import QuizType
from vocab_drill.progress import ProgressStore
from vocab_drill.quiz import check_answer, generate_quiz, grade_for_answer, quiz_accuracy, score_answer
from vocab_drill.selector import due_items
from vocab_drill.sessions import record_session, today_key
from vocab_drill.settings import (
    DEFAULT_LOG_LEVEL, FLASHCARD_SESSION_SIZE, load_quiz_settings,
    normalize_distribution, save_quiz_settings,
)

console = Console()

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a flashcard or quiz session early."""


def session_prompt(text: str, choices: list[str] | None = None, **kwargs) -> str:
    if choices is not None:
        kwargs["choices"] = list(choices) + list(EXIT_WORDS)
    answer = Prompt.ask(text, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(text: str, choices: list[str]) -> int:
    return int(session_prompt(text, choices=choices))


def show_welcome():
    console.print(Panel(
        "[bold]Vocab Drill[/bold]\n[dim]Flashcards, quizzes and spaced review[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("import", "Add words from a file or pasted text"),
        ("flashcards", "Review due flashcards"),
        ("quiz", "Adaptive quiz"),
        ("summary", "Progress summary"),
        ("settings", "Quiz settings"),
        ("reset", "Clear progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")
    console.print("[dim]Type q or menu during a session to stop early.[/dim]")


def finish_session(db_path: str, results: list[bool]) -> None:
    if not results:
        return
    history = record_session(load_history(db_path), today_key(), quiz_accuracy(results), len(results))
    save_history(db_path, history)


def run_flashcard_session(db_path: str, store: ProgressStore, cards: list) -> list[bool]:
    if not cards:
        console.print("[yellow]No flashcards due right now![/yellow]")
        return []
    results = []
    console.print(f"\n[bold]Flashcard Session[/bold] - {len(cards)} cards\n")
    try:
        for i, card in enumerate(cards, 1):
            title = f"Card {i}/{len(cards)}"
            front = card.word + (f" [dim]({card.part_of_speech}.)[/dim]" if card.part_of_speech else "")
            console.print(Panel(front, title=title, border_style="cyan"))
            session_prompt("[dim]Press Enter to reveal[/dim]", default="", show_default=False)
            back = card.definition + (f"\n[dim]{card.example}[/dim]" if card.example else "")
            console.print(Panel(back, border_style="green"))
            answer = session_prompt("Did you remember it?", choices=["y", "n"])
            remembered = answer == "y"
            updated = store.recall(card.id, remembered)
            save_progress(db_path, {card.id: updated})
            results.append(remembered)
            console.print()
    finally:
        finish_session(db_path, results)
    console.print(f"[bold]Remembered {sum(results)}/{len(results)}[/bold]\n")
    return results


def ask_question(question) -> tuple[object, str]:
    """Show a question and collect the response. Returns (response, correct answer text)."""
    if question.type == QuizType.TYPE_IN:
        console.print(f"[bold]Definition:[/bold] {question.prompt}")
        if question.hint:
            console.print(f"[dim]Hint: {question.hint}[/dim]")
        return session_prompt("Your answer"), question.answer
    elif question.type == QuizType.CHOICE:
        console.print(f"[bold]Which word means:[/bold] {question.prompt}\n")
        for n, choice in enumerate(question.choices, 1):
            console.print(f"  [cyan]{n})[/cyan] {choice.content}")
        picked = session_int_prompt("\nYour answer", [str(n) for n in range(1, len(question.choices) + 1)])
        return question.choices[picked - 1].id, question.answer
    elif question.type == QuizType.DRAG_DROP:
        console.print("[bold]Match each definition to its word:[/bold]\n")
        for n, word in enumerate(question.words, 1):
            console.print(f"  [cyan]{n})[/cyan] {word.content}")
        choices = [str(n) for n in range(1, len(question.words) + 1)]
        mapping = {}
        for target in question.targets:
            picked = session_int_prompt(f"\n{target.definition}", choices)
            mapping[target.id] = question.words[picked - 1].id
        by_id = {w.id: w.content for w in question.words}
        expected = ", ".join(by_id[t.answer_id] for t in question.targets)
        return mapping, expected
    raise ValueError(f"Unknown question type: {question.type}")


def run_quiz_session(db_path: str, store: ProgressStore, questions: list) -> tuple[int, int]:
    if not questions:
        console.print("[yellow]No words to quiz on yet. Use 'import' first.[/yellow]")
        return 0, 0
    results = []
    points = 0
    console.print(f"\n[bold]Quiz[/bold] - {len(questions)} questions\n")
    try:
        for i, q in enumerate(questions, 1):
            console.print(f"[bold]Q{i}.[/bold] [dim]({q.type.value}, {q.difficulty.value})[/dim]")
            started = time.monotonic()
            response, expected = ask_question(q)
            is_correct = check_answer(q, response)
            points += score_answer(is_correct, time.monotonic() - started)
            updated = store.grade(q.word_id, grade_for_answer(is_correct, q.difficulty))
            save_progress(db_path, {q.word_id: updated})
            results.append(is_correct)
            if is_correct:
                console.print("[green]Correct![/green]")
            else:
                console.print(f"[red]Incorrect.[/red] Answer: [green]{expected}[/green]")
            console.print()
    finally:
        finish_session(db_path, results)
    correct = sum(results)
    console.print(
        f"[bold]Score: {correct}/{len(results)} ({quiz_accuracy(results)}%), {points} points[/bold]\n"
    )
    return correct, len(results)


def cmd_import(db_path: str):
    mode = Prompt.ask("Import from", choices=["file", "paste"], default="paste")
    if mode == "file":
        file_path = Prompt.ask("File path")
        if not Path(file_path).exists():
            console.print(f"[red]File not found: {file_path}[/red]")
            return
        result = import_file(db_path, file_path)
        console.print(f"[green]Imported {result['added']} words from {result['filename']}[/green]")
        return

    console.print("[dim]One entry per line: word - definition - example. Blank line to finish.[/dim]")
    lines = []
    while True:
        line = Prompt.ask("", default="", show_default=False)
        if not line.strip():
            break
        lines.append(line)
    text = "\n".join(lines)
    ok, message = validate_input(text)
    if not ok:
        console.print(f"[red]{message}[/red]")
        return
    result = import_text(db_path, text)
    console.print(f"[green]{message}. Imported {result['added']} words.[/green]")


def cmd_flashcards(db_path: str):
    pool = load_vocabulary(db_path)
    store = ProgressStore(load_progress(db_path))
    cards = due_items(pool, store)[:FLASHCARD_SESSION_SIZE]
    run_flashcard_session(db_path, store, cards)


def cmd_quiz(db_path: str):
    pool = load_vocabulary(db_path)
    store = ProgressStore(load_progress(db_path))
    quiz_settings = load_quiz_settings(db_path)
    count = IntPrompt.ask("Number of questions", default=quiz_settings["count"])
    questions = generate_quiz(pool, store, count, quiz_settings["distribution"])
    run_quiz_session(db_path, store, questions)


def cmd_summary(db_path: str):
    pool = load_vocabulary(db_path)
    store = ProgressStore(load_progress(db_path))
    history = load_history(db_path)
    stats = get_learning_stats(pool, store, history)
    color = get_accuracy_color(stats["accuracy"])

    console.print(Panel(
        f"[bold]{stats['total']}[/bold] words  |  Accuracy [{color}]{stats['accuracy']}%[/{color}]  |  "
        f"Streak [bold]{stats['streak']}[/bold] days  |  Due [bold]{stats['due_count']}[/bold]",
        title="Progress Summary", border_style="blue",
    ))
    console.print(
        f"  New: {stats['new_count']}  Learning: {stats['learning_count']}  "
        f"Reviewing: {stats['reviewing_count']}  Mastered: [green]{stats['mastered_count']}[/green]"
    )
    console.print(f"  [{color}]{stats['advice']}[/{color}]\n")

    if history:
        table = Table(title="Recent Sessions")
        table.add_column("Date")
        table.add_column("Accuracy", justify="right")
        table.add_column("Words", justify="right")
        for s in history:
            table.add_row(s.date, f"{s.accuracy}%", str(s.words_studied))
        console.print(table)

    revision = get_revision_words(pool, store)
    if revision:
        console.print("\n[bold]Needs Revision:[/bold]")
        for r in revision:
            console.print(f"  [red]{r['error_rate']}% errors[/red] - {r['word']}: {r['definition']}")

    schedule = store.schedule()
    console.print(
        f"\n  Upcoming: today {len(schedule['today'])}, tomorrow {len(schedule['tomorrow'])}, "
        f"this week {len(schedule['this_week'])}, later {len(schedule['later'])}"
    )


def cmd_settings(db_path: str):
    current = load_quiz_settings(db_path)
    dist = current["distribution"]
    console.print(
        f"Questions per quiz: {current['count']}  |  Mix: type-in {dist.type_in:.0%}, "
        f"choice {dist.choice:.0%}, drag-drop {dist.drag_drop:.0%}"
    )
    if not Confirm.ask("Change settings?", default=False):
        return
    count = IntPrompt.ask("Questions per quiz", default=current["count"])
    type_in = IntPrompt.ask("Type-in %", default=round(dist.type_in * 100))
    choice = IntPrompt.ask("Choice %", default=round(dist.choice * 100))
    drag_drop = IntPrompt.ask("Drag-drop %", default=round(dist.drag_drop * 100))
    save_quiz_settings(db_path, count, normalize_distribution(type_in, choice, drag_drop))
    console.print("[green]Settings saved.[/green]")


def cmd_reset(db_path: str):
    if not Confirm.ask("Clear all learning progress?", default=False):
        return
    clear_progress(db_path)
    save_history(db_path, [])
    if Confirm.ask("Also remove all imported words?", default=False):
        clear_vocabulary(db_path)
    console.print("[green]Progress cleared.[/green]")


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{message}</level>")


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="flashcards").strip().lower()
        try:
            if choice == "import":
                cmd_import(db_path)
            elif choice == "flashcards":
                cmd_flashcards(db_path)
            elif choice == "quiz":
                cmd_quiz(db_path)
            elif choice == "summary":
                cmd_summary(db_path)
            elif choice == "settings":
                cmd_settings(db_path)
            elif choice == "reset":
                cmd_reset(db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you next review![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("\n[dim]Session stopped. Progress so far is saved.[/dim]")
        except VocabularyParseError as e:
            console.print(f"[red]{e}[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command failed")
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
