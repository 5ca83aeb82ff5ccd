from scraper.jobactor.detail import DetailEnricher
from scraper.jobactor.models import Job, JobSummary
from conftest import FakePage, detail_html


def _job(job_id, link=True):
    return Job.from_summary(JobSummary(
        id=job_id, title=f'Job {job_id}',
        link=f'https://www.linkedin.com/jobs/view/{job_id}' if link else None,
        salary_info=['$90K', '$100K'],
    ))


def test_failed_visit_leaves_job_untouched(fast_settings):
    page = FakePage({
        'https://www.linkedin.com/jobs/view/1': detail_html(),
        'https://www.linkedin.com/jobs/view/2': RuntimeError('net::ERR_CONNECTION_RESET'),
        'https://www.linkedin.com/jobs/view/3': detail_html(seniority='Entry level'),
    })
    jobs = [_job('1'), _job('2'), _job('3')]
    enricher = DetailEnricher(fast_settings)
    out = enricher.enrich(page, jobs)

    assert [j.id for j in out] == ['1', '2', '3']
    assert out[0].seniority_level == 'Mid-Senior level'
    assert out[2].seniority_level == 'Entry level'
    assert out[1] == jobs[1]
    assert 'descriptionText' not in out[1].to_wire()
    assert enricher.visits == 3
    assert enricher.failures == 1


def test_detail_values_override_summary(fast_settings):
    page = FakePage({'https://www.linkedin.com/jobs/view/1': detail_html()})
    [job] = DetailEnricher(fast_settings).enrich(page, [_job('1')])
    assert job.salary_info == ['$120,000 - $150,000']
    assert job.title == 'Job 1'


def test_missing_detail_salary_keeps_card_salary(fast_settings):
    page = FakePage({'https://www.linkedin.com/jobs/view/1': detail_html(salary=None)})
    [job] = DetailEnricher(fast_settings).enrich(page, [_job('1')])
    assert job.salary_info == ['$90K', '$100K']


def test_jobs_without_link_are_skipped(fast_settings):
    page = FakePage({'https://www.linkedin.com/jobs/view/1': detail_html()})
    enricher = DetailEnricher(fast_settings)
    out = enricher.enrich(page, [_job('9', link=False), _job('1')])
    assert [j.id for j in out] == ['9', '1']
    assert page.visited == ['https://www.linkedin.com/jobs/view/1']
    assert enricher.visits == 1


def test_delay_between_visits(fast_settings):
    import dataclasses
    settings = dataclasses.replace(fast_settings, request_delay_ms=500)
    page = FakePage({'https://www.linkedin.com/jobs/view/': detail_html()})
    DetailEnricher(settings).enrich(page, [_job('1'), _job('2')])
    assert page.timeouts.count(500) == 2
