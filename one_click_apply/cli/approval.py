"""Operator approval of low-confidence answers"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

ACTION_ACCEPT = "accept"
ACTION_EDIT = "edit"
ACTION_REGENERATE = "regenerate"
ACTION_SKIP = "skip"


@dataclass(frozen=True)
class ApprovalResult:
    approved: bool
    final_value: str
    edited: bool = False
    regenerate: bool = False
    skip: bool = False
    extra_context: str = ""
    by_operator: bool = True

    @property
    def action(self):
        if self.skip:
            return ACTION_SKIP
        if self.regenerate:
            return ACTION_REGENERATE
        if self.edited:
            return ACTION_EDIT
        return ACTION_ACCEPT

    @classmethod
    def accepted(cls, value, by_operator=True):
        return cls(approved=True, final_value=value, by_operator=by_operator)

    @classmethod
    def edit(cls, value):
        return cls(approved=True, final_value=value, edited=True)

    @classmethod
    def regenerate_with(cls, proposed_value, extra_context=""):
        return cls(approved=False, final_value=proposed_value, regenerate=True, extra_context=extra_context)

    @classmethod
    def skipped(cls, proposed_value=""):
        return cls(approved=False, final_value=proposed_value, skip=True)


class Approver(ABC):
    """Synchronous approval capability. Blocks until a decision is made."""

    @abstractmethod
    def approve(self, question, proposed_answer: str, confidence: float) -> ApprovalResult:
        ...


class AutoSkipApprover(Approver):
    """Batch mode: anything that needs review skips the job"""

    def approve(self, question, proposed_answer, confidence):
        print(f"\n⏭️  AUTO-SKIP - \"{question.text}\" needs review ({confidence * 100:.0f}% confidence)")
        return ApprovalResult.skipped(proposed_answer)


class AutoAcceptApprover(Approver):
    """Batch mode: accept every proposal as-is"""

    def approve(self, question, proposed_answer, confidence):
        print(f"  ✓ Auto-accepted ({confidence * 100:.0f}%): {proposed_answer}")
        return ApprovalResult.accepted(proposed_answer, by_operator=False)


class ConsoleApprover(Approver):
    """
    Interactive approval on stdin/stdout.

    Shows the question, required flag, options, proposed value and
    confidence, then reads one of a/e/r/s. Anything else, including
    end-of-input, skips the job rather than submitting an unapproved answer.
    """

    def __init__(self, input_func=input):
        self._input = input_func

    def _prompt(self, message):
        try:
            return self._input(message)
        except EOFError:
            return None

    def approve(self, question, proposed_answer, confidence):
        print("\n" + "=" * 80)
        print("❓ ANSWER APPROVAL NEEDED")
        print("=" * 80)
        print(f"\nQuestion: {question.text}")
        print(f"Required: {'YES' if question.required else 'NO'}")

        if question.options:
            print("\nAvailable options:")
            for i, label in enumerate(question.option_labels, 1):
                print(f"  {i}. {label}")

        print(f"\nProposed answer: \"{proposed_answer}\"")
        print(f"Confidence: {confidence * 100:.0f}%")
        print("\n" + "-" * 80)
        print("Options:")
        print("  [a] Approve and use this answer")
        print("  [e] Edit the answer")
        print("  [r] Regenerate answer (ask AI again)")
        print("  [s] Skip this job")
        print("-" * 80)

        choice = self._prompt("Your choice [a/e/r/s]: ")
        choice = (choice or "").strip().lower()

        if choice == "a":
            print("✓ Answer approved\n")
            return ApprovalResult.accepted(proposed_answer)

        if choice == "e":
            new_answer = self._prompt("Enter your answer: ")
            if new_answer is None:
                print("⚠ No input, skipping job\n")
                return ApprovalResult.skipped(proposed_answer)
            new_answer = self._pick_option(question, new_answer.strip())
            print("✓ Answer updated\n")
            return ApprovalResult.edit(new_answer)

        if choice == "r":
            extra = self._prompt("Additional context for the AI (optional): ")
            print("↻ Will regenerate answer\n")
            return ApprovalResult.regenerate_with(proposed_answer, (extra or "").strip())

        if choice == "s":
            print("⊗ Skipping this job\n")
            return ApprovalResult.skipped(proposed_answer)

        print("⚠ Invalid choice, skipping job\n")
        return ApprovalResult.skipped(proposed_answer)

    @staticmethod
    def _pick_option(question, text):
        """Option numbers typed for a select map to that option's label"""
        if question.options and text.isdigit():
            index = int(text) - 1
            if 0 <= index < len(question.options):
                return question.options[index].label
        return text
