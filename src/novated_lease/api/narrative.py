"""Narrative generator — plain-English interpretation of a quote.

Converts a ``Quote`` into structured text that explains the lease cost,
how it is split for tax, what the employee saves, and what to watch out for.
"""

from __future__ import annotations

from novated_lease.models.results import LenderQuote, Quote

_POLICY_LABELS = {
    "zero_emission_exemption": "Zero-emission FBT exemption",
    "contribution_method": "Employee contribution method",
    "operating_cost_method": "Operating cost method",
}


def _heading(sections: list[str], title: str) -> None:
    if sections:
        sections.append("")
    sections.append("=" * 60)
    sections.append(title)
    sections.append("=" * 60)


def generate_narrative(quote: Quote) -> str:
    """Generate a plain-English narrative from a quote.

    Returns a structured text block covering:
      1. Vehicle and lease summary
      2. Finance
      3. Annual running costs
      4. Tax treatment and savings
      5. Comparison with buying outright
      6. Warnings and recommendations
    """
    req = quote.request
    fin = quote.finance
    rc = quote.running_costs
    fb = quote.fringe_benefit
    cmp = quote.comparison

    vehicle = " ".join(str(p) for p in (req.year, req.make, req.model) if p) or "Vehicle"
    sections: list[str] = []

    # ── 1. Summary ──
    _heading(sections, "LEASE SUMMARY")
    sections.append(
        f"Quote: {quote.reference} ({quote.rule_set})\n"
        f"Vehicle: {vehicle} ({quote.vehicle_class.value.replace('_', ' ').title()})\n"
        f"Price: ${req.vehicle_price:,.2f}\n"
        f"State: {req.jurisdiction.value}\n"
        f"Term: {req.term_years} years, {req.annual_distance_km:,.0f} km/year\n"
        f"Zero-emission: {'yes' if req.is_zero_emission else 'no'}"
    )

    # ── 2. Finance ──
    _heading(sections, "FINANCE")
    lender = f" from {quote.lender_id}" if quote.lender_id else ""
    rate = quote.all_up_rate
    sections.append(
        f"Stamp duty: ${quote.duty.duty:,.2f}"
        + (f" ({quote.duty.concession_explanation})" if quote.duty.concession_applied else "")
        + f"\nRegistration: ${quote.duty.registration_fee:,.2f}\n"
        f"Amount financed: ${fin.naf:,.2f} (GST credit ${fin.claimable_gst:,.2f} excluded)\n"
        f"Nominal rate{lender}: {fin.annual_rate * 100:.2f}% p.a.\n"
        f"All-up rate: {rate.annual_rate_pct:.2f}% p.a."
        + (" (at solver boundary)" if rate.at_boundary else "")
        + f"\nMonthly payment: ${fin.monthly_payment:,.2f} over {fin.repayment_months} months "
        f"after a {fin.deferral_months}-month deferral\n"
        f"Balloon (residual): ${fin.balloon:,.2f} ({fin.balloon_fraction * 100:.2f}%)"
    )

    # ── 3. Running costs ──
    _heading(sections, "ANNUAL RUNNING COSTS")
    costs = [
        ("Servicing", rc.service),
        ("Tyres", rc.tyres),
        ("Electricity" if rc.is_zero_emission else "Fuel", rc.energy),
        ("Insurance", rc.insurance),
        ("Registration", rc.registration),
        ("Management fee", rc.management_fee),
    ]
    for name, val in costs:
        sections.append(f"  {name:20s}  ${val:>10,.2f}")
    sections.append(f"  {'Total':20s}  ${rc.total:>10,.2f}")
    sections.append(f"\nFinance + running costs: ${quote.total_annual_cost:,.2f} per year")

    # ── 4. Tax ──
    _heading(sections, "TAX TREATMENT")
    sections.append(
        f"Method: {_POLICY_LABELS.get(fb.policy, fb.policy)}\n"
        f"Paid from pre-tax salary: ${fb.pre_tax_amount:,.2f}\n"
        f"Paid from post-tax salary: ${fb.post_tax_amount:,.2f}\n"
        f"Marginal tax rate: {quote.marginal_tax_rate * 100:.0f}%\n"
        f"Income tax saved: ${fb.income_tax_saving:,.2f}\n"
        f"Medicare levy saved: ${fb.levy_saving:,.2f}\n"
        f"FBT payable: ${fb.fbt_liability:,.2f}"
    )
    if fb.reportable_benefit > 0:
        sections.append(f"Reportable fringe benefit: ${fb.reportable_benefit:,.2f}")
    sections.append(
        f"\nNet cost: ${fb.net_annual_cost:,.2f} per year, "
        f"${quote.periodic_out_of_pocket:,.2f} per {req.pay_frequency.value} pay"
    )

    # ── 5. Comparison ──
    _heading(sections, "NOVATED LEASE VS BUYING OUTRIGHT")
    verdict = "CHEAPER" if cmp.monthly_saving > 0 else "MORE EXPENSIVE"
    sections.append(
        f"Buying outright (after tax): ${cmp.after_tax_purchase_monthly:,.2f}/month\n"
        f"Novated lease (net): ${cmp.novated_lease_monthly:,.2f}/month\n"
        f"The lease is {verdict} by ${abs(cmp.monthly_saving):,.2f}/month "
        f"(${abs(cmp.saving_over_term):,.0f} over the term, {abs(cmp.saving_pct):.1f}%)"
    )

    # ── 6. Advice ──
    if quote.warnings or quote.recommendations:
        _heading(sections, "WARNINGS & RECOMMENDATIONS")
        for w in quote.warnings:
            sections.append(f"  ⚠ {w}")
        for r in quote.recommendations:
            sections.append(f"  [{r.priority.upper()}] {r.title}: {r.message}")

    return "\n".join(sections)


def generate_comparison_narrative(quotes: list[LenderQuote]) -> str:
    """Side-by-side summary of lender quotes, cheapest first."""
    if not quotes:
        return "No lenders registered."

    lines = ["LENDER COMPARISON (cheapest monthly payment first)", "=" * 60]
    for i, q in enumerate(quotes, 1):
        lines.append(
            f"{i}. {q.lender_id:12s}  rate {q.nominal_rate * 100:5.2f}%  "
            f"all-up {q.all_up_rate.annual_rate_pct:5.2f}%  "
            f"payment ${q.schedule.monthly_payment:,.2f}  total ${q.total_cost:,.2f}"
        )

    best, worst = quotes[0], quotes[-1]
    if len(quotes) > 1:
        diff = worst.total_cost - best.total_cost
        lines.append(
            f"\n{best.lender_id} saves ${diff:,.2f} in repayments over the term "
            f"compared with {worst.lender_id}."
        )
    return "\n".join(lines)
