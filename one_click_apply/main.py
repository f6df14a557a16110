#!/usr/bin/env python3
"""
One-Click Apply Bot - Main Orchestration

Wires the browser, interview client, answer engine and approver together and
runs one job or a batch of jobs from a links file.
"""

import sys
import argparse
from collections import Counter
from urllib.parse import parse_qs, urlparse

from one_click_apply.browser.session import close_browser, launch_browser
from one_click_apply.cli.approval import AutoAcceptApprover, AutoSkipApprover, ConsoleApprover
from one_click_apply.data.answer_cache import JsonAnswerCache
from one_click_apply.data.candidate_profile import load_profile, profile_to_text
from one_click_apply.data.models import JOB_APPLIED, JOB_FAILED, JOB_SKIPPED, JOB_UNAVAILABLE, Job, JobResult
from one_click_apply.debug.unresolved_collector import UnresolvedCollector
from one_click_apply.errors import ConfigurationError
from one_click_apply.flows.orchestrator import FAIL_PAGE_LOAD, ApplicationOrchestrator
from one_click_apply.interaction.buttons import PlaywrightBrowser
from one_click_apply.llm.provider import OpenAICompletionProvider
from one_click_apply.protocol.client import InterviewProtocolClient
from one_click_apply.protocol.transport import PlaywrightTransport
from one_click_apply.reasoning.engine import AnswerResolutionEngine
from one_click_apply.utils.logging import log_result
from one_click_apply.utils.timing import human_delay
import one_click_apply.config as config

SUMMARY_ORDER = [JOB_APPLIED, JOB_SKIPPED, JOB_UNAVAILABLE, JOB_FAILED]


def load_job_links(file_path):
    """Load job URLs from file, one per line. Strips comments and deduplicates."""
    with open(file_path, "r") as f:
        urls = []
        seen = set()
        for line in f:
            # Strip whitespace and ignore comments
            line = line.strip()
            if line and not line.startswith("#"):
                if line not in seen:
                    urls.append(line)
                    seen.add(line)
        return urls


def job_from_url(url, listing_key=None, title=""):
    """
    Build a Job from a posting URL.

    The listing key comes from the `lk` query parameter unless given
    explicitly; the job id from `jid`, falling back to the listing key.
    """
    query = parse_qs(urlparse(url).query)
    key = listing_key or (query.get("lk") or [""])[0]
    if not key:
        return None
    job_id = (query.get("jid") or [key])[0]
    return Job(job_id=job_id, url=url, listing_key=key, title=title)


def build_approver(args):
    if args.auto_skip:
        print("🤖 Auto-skip mode - low-confidence answers skip the job\n")
        return AutoSkipApprover()
    if args.auto_accept:
        print("🤖 Auto-accept mode - low-confidence answers are submitted as proposed\n")
        return AutoAcceptApprover()
    print("🔧 Interactive mode - low-confidence answers wait for your review\n")
    return ConsoleApprover()


def print_summary(results):
    print("\n" + "=" * 60)
    print("BATCH COMPLETE")
    print("=" * 60)

    counts = Counter(result.status for result in results)

    print(f"\nProcessed {len(results)} jobs:")
    for status in SUMMARY_ORDER:
        if counts[status] > 0:
            print(f"  {status}: {counts[status]}")

    applied = sum(1 for r in results if r.applied)
    skipped = sum(1 for r in results if r.skipped)
    failed = sum(1 for r in results if r.error)
    print(f"\n✓ {applied} applied, ⏭️  {skipped} skipped, ❌ {failed} failed")


def main(argv=None):
    # Parse command-line arguments
    parser = argparse.ArgumentParser(
        description="One-Click Apply Bot - answers interview questionnaires and submits applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Approval Modes:
  --interactive     Review low-confidence answers in the console (default)
  --auto-skip       Skip any job that needs review
  --auto-accept     Submit low-confidence answers as proposed

Batch Mode:
  --links-file FILE Process multiple job URLs from file (one per line)

Examples:
  python -m one_click_apply.main "https://www.ziprecruiter.com/c/Acme/Job/Engineer?jid=abc&lk=XYZ"
  python -m one_click_apply.main --listing-key XYZ --title "Engineer" "https://www.ziprecruiter.com/jobs/abc"
  python -m one_click_apply.main --auto-skip --links-file jobs.txt
        """,
    )
    parser.add_argument("job_url", nargs="?", help="Job posting URL to apply to")
    parser.add_argument("--listing-key", help="Listing key (defaults to the URL's lk parameter)")
    parser.add_argument("--title", default="", help="Job title, used to find the job card")
    parser.add_argument(
        "--links-file",
        help="File containing job URLs (one per line) for batch processing",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--interactive", action="store_true", help="Console review of low-confidence answers (default)")
    mode.add_argument("--auto-skip", action="store_true", help="Skip jobs that need review")
    mode.add_argument("--auto-accept", action="store_true", help="Accept proposed answers without review")
    parser.add_argument("--profile", default=None, help=f"Candidate profile JSON (default: {config.PROFILE_FILE})")
    parser.add_argument(
        "--debug-unresolved",
        action="store_true",
        help="Record every question that needed review for debugging coverage gaps (observability only)",
    )

    args = parser.parse_args(argv)

    # Validate: either job_url or --links-file must be provided
    if not args.job_url and not args.links_file:
        parser.error("Either job_url or --links-file must be provided")
    if args.job_url and args.links_file:
        parser.error("Cannot use both job_url and --links-file")
    if args.links_file and args.listing_key:
        parser.error("--listing-key only applies to a single job_url")

    if args.links_file:
        job_urls = load_job_links(args.links_file)
        print(f"📋 Batch mode: {len(job_urls)} jobs loaded from {args.links_file}\n")
        candidates = [(url, job_from_url(url)) for url in job_urls]
    else:
        candidates = [(args.job_url, job_from_url(args.job_url, args.listing_key, args.title))]

    jobs = []
    for url, job in candidates:
        if job is None:
            print(f"⚠️ No listing key in URL, skipping: {url}")
        else:
            jobs.append(job)
    if not jobs:
        parser.error("No job with a listing key to process")

    try:
        api_key = config.require_api_key()
    except ConfigurationError as e:
        print(f"✗ {e.message}")
        return 1

    profile_text = profile_to_text(load_profile(args.profile or config.PROFILE_FILE))
    approver = build_approver(args)

    collector = None
    if args.debug_unresolved:
        # Clear previous debug log to start fresh
        with open(config.DEBUG_UNRESOLVED_FILE, "w", encoding="utf-8"):
            pass
        collector = UnresolvedCollector(config.DEBUG_UNRESOLVED_FILE)
        print(f"🔍 Debug mode enabled - recording unresolved questions to {config.DEBUG_UNRESOLVED_FILE}\n")

    cache = JsonAnswerCache(config.CACHE_FILE, config.CACHE_ACCEPTANCE_THRESHOLD)
    provider = OpenAICompletionProvider(api_key=api_key, model=config.LLM_MODEL, temperature=config.LLM_TEMPERATURE)
    engine = AnswerResolutionEngine(cache, provider)
    print(f"💾 Answer cache: {len(cache)} records from {config.CACHE_FILE}")

    # Launch browser once for all jobs
    p, context, page = launch_browser()
    browser = PlaywrightBrowser(page)
    client = InterviewProtocolClient(PlaywrightTransport(page))
    orchestrator = ApplicationOrchestrator(
        browser,
        client,
        engine,
        approver,
        profile_text=profile_text,
        collector=collector,
    )

    results = []
    try:
        for job_index, job in enumerate(jobs, 1):
            if len(jobs) > 1:
                print("\n" + "=" * 60)
                print(f"JOB {job_index}/{len(jobs)}")
                print("=" * 60)

            if browser.open_job(job):
                results.append(orchestrator.apply_to_job(job))
            else:
                result = JobResult(job.job_id, JOB_FAILED, "Could not load job page", FAIL_PAGE_LOAD)
                log_result(job.url, result.status, result.reason, job_id=job.job_id, reason_code=result.reason_code)
                results.append(result)

            if job_index < len(jobs):
                human_delay(config.JOB_DELAY_MIN, config.JOB_DELAY_MAX)
    except KeyboardInterrupt:
        print("\n\n⏹ Interrupted - stopping batch")
    finally:
        if len(jobs) > 1:
            print_summary(results)
        print("\nClosing browser...")
        close_browser(p, context)

    return 0 if all(not r.error for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
