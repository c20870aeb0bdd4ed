"""Basic usage: fetch today's heats, print lap statistics and updated ratings."""

from kartstats import RatingConfig, StatsConfig
from kartstats.aggregation import heat_driver_summaries
from kartstats.exceptions import IngestError
from kartstats.ingest import EntityRegistry, HeatResultsClient, normalize_heat
from kartstats.rating import WengLinModel, apply_all_ratings


def main() -> None:
    model = WengLinModel(RatingConfig.from_env())
    registry = EntityRegistry(prior=model.initial_rating())
    laps = []
    config = StatsConfig.from_env()

    with HeatResultsClient() as client:
        try:
            heat_ids = client.todays_heat_ids()
        except IngestError as exc:
            print(f"Could not list today's heats: {exc}")
            return

        for heat_id in heat_ids:
            try:
                normalized = normalize_heat(client.heat(heat_id), registry)
            except IngestError as exc:
                print(f"  skipping {heat_id}: {exc}")
                continue
            laps.extend(normalized.laps)

            heat = normalized.heat
            print(f"\n=== {heat.category or 'Heat'} {heat.external_id} ({heat.start_time:%H:%M}) ===")
            summaries = heat_driver_summaries(
                heat, normalized.laps, registry.drivers, registry.karts, config
            )
            for position, s in enumerate(summaries, start=1):
                print(
                    f"  {position:>2}. {s.driver_name:<24} kart {s.kart_number:>2}  "
                    f"best {s.fastest_lap.duration:.3f}s  avg {s.average:.3f}s  "
                    f"({len(s.outlier_laps)} outlier laps)"
                )

    if not laps:
        print("No heats today.")
        return

    result = apply_all_ratings(registry.heats.values(), laps, registry.drivers.values(), model)
    registry.apply_ratings(result.ratings)
    print("\n=== Ratings ===")
    for driver in sorted(registry.drivers.values(), key=lambda d: -d.rating.ordinal):
        print(f"  {driver.name:<24} mu {driver.rating_mu:6.2f}  sigma {driver.rating_sigma:5.2f}")
    for skipped in result.skipped:
        print(f"  not rated: {skipped}")


if __name__ == "__main__":
    main()
