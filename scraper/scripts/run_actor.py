from pathlib import Path
import argparse
import json
import logging
import sys

from pydantic import ValidationError

from scraper.jobactor.errors import ActorError
from scraper.jobactor.logging_config import setup_logging, log_event
from scraper.jobactor.registry import get_actor, list_actors, run_actor


def build_payload(args) -> dict:
    payload = {
        'keywords': args.keywords or '',
        'location': args.location or '',
        'limit': args.limit,
        'startFrom': args.start_from,
        'includeDetails': not args.no_details,
        'scrapeCompany': args.scrape_company,
    }
    for key, value in (
        ('experienceLevel', args.experience_level),
        ('jobType', args.job_type),
        ('workSchedule', args.work_schedule),
        ('jobPostTime', args.job_post_time),
    ):
        if value:
            payload[key] = value if len(value) > 1 else value[0]
    if args.company:
        payload['companyNames'] = args.company
    return payload


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description='Run a scraping actor against the Steel browser service')
    ap.add_argument('--actor', default='linkedin-jobs', help='Actor id (default linkedin-jobs)')
    ap.add_argument('--list-actors', action='store_true', help='Print registered actors and exit')
    ap.add_argument('--keywords', type=str, help='Search keywords')
    ap.add_argument('--location', type=str, help='Job location')
    ap.add_argument('--limit', type=int, default=25, help='Max results (default 25)')
    ap.add_argument('--start-from', type=int, default=0, help='Pagination offset')
    ap.add_argument('--experience-level', action='append', help='Experience level code 1-6 (repeatable)')
    ap.add_argument('--job-type', action='append', help='Job type code F/P/C/T/V/I/O (repeatable)')
    ap.add_argument('--work-schedule', action='append', help='1 on-site, 2 remote, 3 hybrid (repeatable)')
    ap.add_argument('--job-post-time', action='append', help='r86400 | r604800 | r2592000')
    ap.add_argument('--company', action='append', help='Company name allowlist entry (repeatable)')
    ap.add_argument('--no-details', action='store_true', help='Skip per-job detail pages')
    ap.add_argument('--scrape-company', action='store_true', help='Visit company pages')
    ap.add_argument('--output', type=str, help='Write JSON result to this file instead of stdout')
    ap.add_argument('--debug', action='store_true', help='Enable debug logging')
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(debug=args.debug)
    logger = logging.getLogger('cli')
    if args.list_actors:
        print(json.dumps(list_actors(), indent=2))
        return 0
    try:
        get_actor(args.actor)
    except KeyError as e:
        logger.error(str(e))
        return 2
    payload = build_payload(args)
    logger.info(f"Running actor {args.actor} with {payload}")
    try:
        result = run_actor(args.actor, payload)
    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        return 2
    except ActorError as e:
        logger.error(f"Run failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Run failed: {e}")
        return 1
    text = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding='utf-8')
        logger.info(f"Wrote {result['count']} jobs to {out}")
        log_event('result_written', path=str(out), count=result['count'])
    else:
        print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
